import json


def handler(event, context):
    """
    Downstream 'hello' function behind the hit counter.

    Lambda Proxy Response Format: https://docs.aws.amazon.com/apigateway/latest/developerguide/set-up-lambda-proxy-integrations.html#api-gateway-simple-proxy-for-lambda-output-format
    """
    print(f"request: {json.dumps(event)}")
    return {
        'statusCode': 200,
        'headers': {
            'Content-Type': 'text/plain'
        },
        'body': f"Hello, CDK! You've hit {event['path']}\n"
    }
