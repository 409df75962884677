#!/usr/bin/env python3
import os
import aws_cdk as cdk
from cdk_workshop.constants import DEFAULT_BRANCH, DEFAULT_REGION, REPOSITORY_NAME
from cdk_workshop.pipeline_stack import WorkshopPipelineStack

# Initialize CDK application
# The App is the root construct that contains all stacks
# Documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk/App.html
app = cdk.App()

# Source repository settings can be overridden with -c repositoryName=... -c branch=...
# Context documentation: https://docs.aws.amazon.com/cdk/v2/guide/context.html
repository_name = app.node.try_get_context("repositoryName") or REPOSITORY_NAME
branch = app.node.try_get_context("branch") or DEFAULT_BRANCH

# Create the CI/CD Pipeline Stack
# The pipeline deploys the web service and smoke tests its published URLs
WorkshopPipelineStack(
    app,
    "WorkshopPipelineStack",
    repository_name=repository_name,
    branch=branch,
    env=cdk.Environment(
        # Account and region are retrieved from environment variables or AWS CLI config
        # Documentation: https://docs.aws.amazon.com/cdk/v2/guide/environments.html
        account=os.getenv('CDK_DEFAULT_ACCOUNT'),
        region=os.getenv('CDK_DEFAULT_REGION', DEFAULT_REGION)
    )
)

# Synthesize CloudFormation templates into cdk.out
app.synth()
