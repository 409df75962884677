import json
import os
import boto3

# DynamoDB table holding one item per request path
# Table Resource API: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/dynamodb/table/index.html
dynamodb = boto3.resource('dynamodb')
table = dynamodb.Table(os.environ['HITS_TABLE_NAME'])

# Lambda client for calling the downstream function
# Invoke API: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/lambda/client/invoke.html
lambda_client = boto3.client('lambda')


def handler(event, context):
    """
    Count the hit for the request path, then return the downstream response.
    """
    print(f"request: {json.dumps(event)}")

    try:
        # ADD creates the 'hits' attribute on first use
        # Update Expressions: https://docs.aws.amazon.com/amazondynamodb/latest/developerguide/Expressions.UpdateExpressions.html
        table.update_item(
            Key={'path': event['path']},
            UpdateExpression='ADD hits :incr',
            ExpressionAttributeValues={':incr': 1}
        )

        response = lambda_client.invoke(
            FunctionName=os.environ['DOWNSTREAM_FUNCTION_NAME'],
            Payload=json.dumps(event)
        )
        body = response['Payload'].read()
        print(f"downstream response: {body}")

        return json.loads(body)
    except Exception as e:
        print(f"Error: {str(e)}")
        return error_response(500, f"Internal error: {str(e)}")


def error_response(status_code, message):
    return {
        'statusCode': status_code,
        'headers': {
            'Content-Type': 'application/json'
        },
        'body': json.dumps({'error': message})
    }
