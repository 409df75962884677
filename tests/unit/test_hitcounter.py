import aws_cdk as cdk
import aws_cdk.assertions as assertions
import pytest
from aws_cdk import aws_lambda as lambda_
from cdk_workshop.hitcounter import HitCounter


def make_downstream(stack):
    return lambda_.Function(
        stack, "TestFunction",
        runtime=lambda_.Runtime.PYTHON_3_11,
        handler="hello.handler",
        code=lambda_.Code.from_inline("def handler(event, context): pass")
    )


def test_hitcounter_table_created():
    stack = cdk.Stack(cdk.App(), "HitCounterTest")
    HitCounter(stack, "HitCounter", downstream=make_downstream(stack))

    template = assertions.Template.from_stack(stack)
    template.resource_count_is("AWS::DynamoDB::Table", 1)


def test_hitcounter_lambda_environment():
    stack = cdk.Stack(cdk.App(), "HitCounterTest")
    HitCounter(stack, "HitCounter", downstream=make_downstream(stack))

    template = assertions.Template.from_stack(stack)
    template.has_resource_properties(
        "AWS::Lambda::Function",
        {
            "Handler": "hitcount.handler",
            "Environment": {
                "Variables": {
                    "DOWNSTREAM_FUNCTION_NAME": {"Ref": assertions.Match.string_like_regexp("TestFunction")},
                    "HITS_TABLE_NAME": {"Ref": assertions.Match.string_like_regexp("HitCounterHits")}
                }
            }
        }
    )


def test_hitcounter_read_capacity():
    stack = cdk.Stack(cdk.App(), "HitCounterTest")
    HitCounter(stack, "HitCounter", downstream=make_downstream(stack), read_capacity=10)

    template = assertions.Template.from_stack(stack)
    template.has_resource_properties(
        "AWS::DynamoDB::Table",
        {"ProvisionedThroughput": {"ReadCapacityUnits": 10}}
    )


@pytest.mark.parametrize("read_capacity", [3, 21])
def test_hitcounter_read_capacity_out_of_range(read_capacity):
    stack = cdk.Stack(cdk.App(), "HitCounterTest")
    with pytest.raises(ValueError):
        HitCounter(stack, "HitCounter", downstream=make_downstream(stack), read_capacity=read_capacity)
