from typing import Tuple

from aws_cdk import CfnOutput, Stage
from constructs import Construct

from .cdk_workshop_stack import CdkWorkshopStack
from .constants import APP_STACK_ID, OUTPUT_ENDPOINT_URL, OUTPUT_VIEWER_URL
from .outputs import OutputRegistry

# Outputs of the application stack that the pipeline may consume
REEXPORTED_OUTPUTS = (OUTPUT_VIEWER_URL, OUTPUT_ENDPOINT_URL)


class WorkshopPipelineStage(Stage):
    """
    Deployment stage for the workshop web service.

    Owns one CdkWorkshopStack and re-exports its URL outputs under the same
    names, so the pipeline can bind smoke tests to them without knowing the
    stack type. Re-exported values are the stack's own CfnOutput objects.
    """

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        """
        Initialize a pipeline stage.

        kwargs are stage-level settings such as env.
        """
        super().__init__(scope, construct_id, **kwargs)

        # Stack documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk/Stack.html
        self._service = CdkWorkshopStack(self, APP_STACK_ID)

        self._outputs = OutputRegistry(construct_id)
        self._outputs.reexport(self._service, REEXPORTED_OUTPUTS)

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
