from typing import Optional

from aws_cdk import (
    Duration,
    aws_lambda as lambda_,
    aws_dynamodb as dynamodb,
    aws_logs as logs,
    aws_apigateway as apigateway,
)
from constructs import Construct

from .constants import ENV_SORT_BY, ENV_TABLE_NAME, ENV_TITLE
from .hitcounter import LAMBDA_ASSET_DIR


class TableViewer(Construct):
    """
    Public HTML view of a DynamoDB table.

    A read-only Lambda scans the table and renders it as an HTML page,
    served through its own API Gateway endpoint.
    """

    @property
    def endpoint(self) -> str:
        """Deploy-time token for the viewer's public URL."""
        return self._api.url

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        table: dynamodb.ITable,
        title: Optional[str] = None,
        sort_by: Optional[str] = None,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        environment = {ENV_TABLE_NAME: table.table_name}
        if title:
            environment[ENV_TITLE] = title
        if sort_by:
            # '-' prefix sorts descending, e.g. '-hits'
            environment[ENV_SORT_BY] = sort_by

        render_lambda = lambda_.Function(
            self, "Rendered",
            runtime=lambda_.Runtime.PYTHON_3_11,
            handler="table_viewer.handler",
            code=lambda_.Code.from_asset(LAMBDA_ASSET_DIR),
            timeout=Duration.seconds(30),
            log_retention=logs.RetentionDays.ONE_WEEK,
            environment=environment
        )
        table.grant_read_data(render_lambda)

        # LambdaRestApi documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_apigateway/LambdaRestApi.html
        self._api = apigateway.LambdaRestApi(
            self, "ViewerEndpoint",
            handler=render_lambda
        )
