"""
CDK Workshop Application Stack
Defines the web service deployed by the pipeline and publishes its public URLs

AWS Services Used:
- AWS Lambda: 'hello' function, hit counter and table viewer renderer
  Documentation: https://docs.aws.amazon.com/lambda/latest/dg/welcome.html
- Amazon API Gateway: public endpoints for the hit-counted API and the viewer
  Documentation: https://docs.aws.amazon.com/apigateway/latest/developerguide/welcome.html
- Amazon DynamoDB: per-path hit counts
  Documentation: https://docs.aws.amazon.com/amazondynamodb/latest/developerguide/Introduction.html

Architecture Overview:
1. API Gateway -> HitCounter Lambda -> Hello Lambda
2. HitCounter increments the hit count of each request path in DynamoDB
3. TableViewer renders the hits table as an HTML page on its own endpoint

Published Outputs:
- ViewerURL: table viewer URL
- EndpointURL: API Gateway URL of the hit-counted service
"""

from typing import Optional, Tuple

from aws_cdk import (
    Stack,
    Duration,
    CfnOutput,
    aws_lambda as lambda_,
    aws_logs as logs,
    aws_apigateway as apigateway,
)
from constructs import Construct

from .constants import OUTPUT_ENDPOINT_URL, OUTPUT_VIEWER_URL
from .hitcounter import HitCounter, LAMBDA_ASSET_DIR
from .outputs import OutputRegistry
from .table_viewer import TableViewer


class CdkWorkshopStack(Stack):
    """
    The workshop web service.

    Deployed by the pipeline through WorkshopPipelineStage; the two URL
    outputs are what the post-deploy smoke tests call.
    """

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self._outputs = OutputRegistry(construct_id)

        # ========================================================================
        # LAMBDA FUNCTION: Hello Handler
        # ========================================================================
        # Lambda Function documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_lambda/Function.html
        hello = lambda_.Function(
            self, "HelloHandler",
            runtime=lambda_.Runtime.PYTHON_3_11,
            handler="hello.handler",
            code=lambda_.Code.from_asset(LAMBDA_ASSET_DIR),
            timeout=Duration.seconds(10),
            log_retention=logs.RetentionDays.ONE_WEEK
        )

        # ========================================================================
        # HIT COUNTER: Counts requests per path, then calls Hello
        # ========================================================================
        hello_with_counter = HitCounter(
            self, "HelloHitCounter",
            downstream=hello
        )

        # ========================================================================
        # API GATEWAY: Public endpoint proxying every path to the hit counter
        # ========================================================================
        # LambdaRestApi documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_apigateway/LambdaRestApi.html
        gateway = apigateway.LambdaRestApi(
            self, "Endpoint",
            handler=hello_with_counter.handler
        )

        # ========================================================================
        # TABLE VIEWER: HTML view of the hit counts
        # ========================================================================
        viewer = TableViewer(
            self, "ViewHitCounter",
            title="Hello Hits",
            table=hello_with_counter.table,
            sort_by="-hits"
        )

        # ========================================================================
        # CLOUDFORMATION OUTPUTS: Public URLs for the pipeline smoke tests
        # ========================================================================
        # Values are deploy-time tokens; they are resolved by CloudFormation
        self.publish_output(
            OUTPUT_VIEWER_URL,
            viewer.endpoint,
            description="Table viewer URL"
        )
        self.publish_output(
            OUTPUT_ENDPOINT_URL,
            gateway.url,
            description="API Gateway URL of the hit-counted service"
        )

    def publish_output(self, name: str, value: str, description: Optional[str] = None) -> CfnOutput:
        """
        Declare a named CfnOutput on this stack.

        Raises:
            DuplicateOutputError: if name is already published by this stack
        """
        self._outputs.check_available(name)
        handle = CfnOutput(self, name, value=value, description=description)
        return self._outputs.add(name, handle)

    @property
    def output_names(self) -> Tuple[str, ...]:
        return self._outputs.names

    def output(self, name: str) -> CfnOutput:
        return self._outputs.get(name)

    @property
    def viewer_url(self) -> CfnOutput:
        return self._outputs.get(OUTPUT_VIEWER_URL)

    @property
    def endpoint_url(self) -> CfnOutput:
        return self._outputs.get(OUTPUT_ENDPOINT_URL)
