"""Shared names for the workshop stacks, pipeline and smoke tests."""

# Stack output names
OUTPUT_VIEWER_URL = "ViewerURL"
OUTPUT_ENDPOINT_URL = "EndpointURL"

# Construct ids
APP_STACK_ID = "WebService"
DEPLOY_STAGE_ID = "Deploy"

# Pipeline defaults (overridable through CDK context)
PIPELINE_NAME = "WorkshopPipeline"
REPOSITORY_NAME = "WorkshopRepo"
DEFAULT_BRANCH = "main"
DEFAULT_REGION = "us-east-1"

SYNTH_COMMANDS = [
    "npm install -g aws-cdk",
    "python -m pip install -e .",
    "npx cdk synth",
]

# Environment variable keys
ENV_ENDPOINT_URL = "ENDPOINT_URL"
ENV_DOWNSTREAM_FUNCTION_NAME = "DOWNSTREAM_FUNCTION_NAME"
ENV_HITS_TABLE_NAME = "HITS_TABLE_NAME"
ENV_TABLE_NAME = "TABLE_NAME"
ENV_TITLE = "TITLE"
ENV_SORT_BY = "SORT_BY"

# Post-deploy smoke tests: (step name, {env var: output name}, commands)
DEFAULT_VALIDATION_STEPS = [
    (
        "TestViewerEndpoint",
        {ENV_ENDPOINT_URL: OUTPUT_VIEWER_URL},
        ["curl -Ssf $ENDPOINT_URL"],
    ),
    (
        "TestAPIGatewayEndpoint",
        {ENV_ENDPOINT_URL: OUTPUT_ENDPOINT_URL},
        [
            "curl -Ssf $ENDPOINT_URL",
            "curl -Ssf $ENDPOINT_URL/hello",
            "curl -Ssf $ENDPOINT_URL/test",
        ],
    ),
]
