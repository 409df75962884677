import html
import json
import os
import boto3

# Read-only access to the table being viewed
# DynamoDB Resource API: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/dynamodb.html#service-resource
dynamodb = boto3.resource('dynamodb')
table = dynamodb.Table(os.environ['TABLE_NAME'])

TITLE = os.environ.get('TITLE', os.environ['TABLE_NAME'])
SORT_BY = os.environ.get('SORT_BY')


def handler(event, context):
    """
    Render the whole table as an HTML page.

    SORT_BY names the attribute to order rows by; a leading '-' sorts descending.
    """
    print(f"request: {json.dumps(event)}")

    try:
        items = scan_all()
        items = sort_items(items, SORT_BY)
        return html_response(200, render_page(TITLE, items))
    except Exception as e:
        print(f"Error: {str(e)}")
        return html_response(500, render_error(str(e)))


def scan_all():
    """
    Scan every page of the table.

    DynamoDB Scan: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/dynamodb/table/scan.html
    """
    response = table.scan()
    items = response.get('Items', [])
    while 'LastEvaluatedKey' in response:
        response = table.scan(ExclusiveStartKey=response['LastEvaluatedKey'])
        items.extend(response.get('Items', []))
    return items


def sort_items(items, sort_by):
    if not sort_by:
        return items
    descending = sort_by.startswith('-')
    key = sort_by.lstrip('-')
    # Rows without the attribute go last in either direction
    present = [item for item in items if key in item]
    missing = [item for item in items if key not in item]
    present.sort(key=lambda item: item[key], reverse=descending)
    return present + missing


def render_page(title, items):
    columns = []
    for item in items:
        for column in item:
            if column not in columns:
                columns.append(column)

    header = ''.join(f"<th>{html.escape(column)}</th>" for column in columns)
    rows = []
    for item in items:
        cells = ''.join(
            f"<td>{html.escape(str(item.get(column, '')))}</td>" for column in columns
        )
        rows.append(f"<tr>{cells}</tr>")

    return (
        "<html><head><meta charset='utf-8'>"
        f"<title>{html.escape(title)}</title></head><body>"
        f"<h1>{html.escape(title)}</h1>"
        f"<table border='1'><thead><tr>{header}</tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table>"
        "</body></html>"
    )


def render_error(message):
    return f"<html><body><h1>Error</h1><pre>{html.escape(message)}</pre></body></html>"


def html_response(status_code, body):
    return {
        'statusCode': status_code,
        'headers': {
            'Content-Type': 'text/html'
        },
        'body': body
    }
