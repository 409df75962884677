from typing import Iterable, Optional

from aws_cdk import (
    Stack,
    pipelines,
    aws_codecommit as codecommit,
)
from constructs import Construct

from .constants import (
    DEFAULT_BRANCH,
    DEPLOY_STAGE_ID,
    PIPELINE_NAME,
    REPOSITORY_NAME,
    SYNTH_COMMANDS,
)
from .pipeline_stage import WorkshopPipelineStage
from .validation import ValidationStep, build_post_steps, default_validation_steps


class WorkshopPipelineStack(Stack):
    """
    Defines the CI/CD pipeline for the workshop web service.

    Pipeline Flow:
    1. Source Stage: Pull code from the CodeCommit repository
    2. Build Stage: Run CDK synth via CodeBuild
    3. Deploy Stage: Deploy the web service stack
    4. Post-deploy: Smoke test the viewer and API URLs from the stack outputs
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        validation_steps: Optional[Iterable[ValidationStep]] = None,
        repository_name: str = REPOSITORY_NAME,
        branch: str = DEFAULT_BRANCH,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        if validation_steps is None:
            validation_steps = default_validation_steps()
        self.validation_steps = list(validation_steps)

        # SOURCE STAGE: CodeCommit Repository
        # Repository documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_codecommit/Repository.html
        repo = codecommit.Repository(
            self, "WorkshopRepo",
            repository_name=repository_name
        )
        source = pipelines.CodePipelineSource.code_commit(repo, branch)

        # BUILD STAGE: CDK Synthesis via CodeBuild
        # Documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.pipelines/ShellStep.html
        synth_step = pipelines.ShellStep(
            "Synth",
            input=source,
            commands=list(SYNTH_COMMANDS)
        )

        # PIPELINE DEFINITION: Create CodePipeline
        # Documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.pipelines/CodePipeline.html
        self.pipeline = pipelines.CodePipeline(
            self, "Pipeline",
            pipeline_name=PIPELINE_NAME,
            synth=synth_step
        )

        # DEPLOY STAGE: the web service
        # Stage documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk/Stage.html
        self.deploy_stage = WorkshopPipelineStage(self, DEPLOY_STAGE_ID)

        # SMOKE TESTS: bound only through the stage's re-exported outputs.
        # All bindings are resolved before the stage joins the pipeline.
        self.post_steps = build_post_steps(self.validation_steps, self.deploy_stage)

        self.pipeline.add_stage(
            self.deploy_stage,
            post=self.post_steps
        )
