from aws_cdk import (
    Duration,
    RemovalPolicy,
    aws_lambda as lambda_,
    aws_dynamodb as dynamodb,
    aws_logs as logs,
)
from constructs import Construct

from .constants import ENV_DOWNSTREAM_FUNCTION_NAME, ENV_HITS_TABLE_NAME

LAMBDA_ASSET_DIR = "./modules"


class HitCounter(Construct):
    """
    Counts requests per URL path before passing them to a downstream Lambda.

    Wraps the downstream function with a counting Lambda that increments the
    'hits' attribute of the request path in a DynamoDB table, then invokes
    the downstream function and returns its response unchanged.
    """

    @property
    def handler(self) -> lambda_.Function:
        return self._handler

    @property
    def table(self) -> dynamodb.Table:
        return self._table

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        downstream: lambda_.IFunction,
        read_capacity: int = 5,
        **kwargs
    ) -> None:
        # DynamoDB provisioned throughput limits for this workshop table
        if read_capacity < 5 or read_capacity > 20:
            raise ValueError("read_capacity must be between 5 and 20")

        super().__init__(scope, construct_id, **kwargs)

        # Partition key is the request path, e.g. '/hello'
        # Table documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_dynamodb/Table.html
        self._table = dynamodb.Table(
            self, "Hits",
            partition_key=dynamodb.Attribute(
                name="path",
                type=dynamodb.AttributeType.STRING
            ),
            encryption=dynamodb.TableEncryption.AWS_MANAGED,
            read_capacity=read_capacity,
            removal_policy=RemovalPolicy.DESTROY
        )

        self._handler = lambda_.Function(
            self, "HitCountHandler",
            runtime=lambda_.Runtime.PYTHON_3_11,
            handler="hitcount.handler",
            code=lambda_.Code.from_asset(LAMBDA_ASSET_DIR),
            timeout=Duration.seconds(30),
            log_retention=logs.RetentionDays.ONE_WEEK,
            environment={
                ENV_DOWNSTREAM_FUNCTION_NAME: downstream.function_name,
                ENV_HITS_TABLE_NAME: self._table.table_name
            }
        )

        # IAM PERMISSIONS: count in the table, then call through to downstream
        self._table.grant_read_write_data(self._handler)
        downstream.grant_invoke(self._handler)
