from flask import Blueprint, request, jsonify, current_app, abort
from ariadne import graphql_sync
from ariadne.explorer import ExplorerGraphiQL

from profile_api.errors import format_graphql_error
from profile_api.routes import schema

bp = Blueprint("graphql", __name__)

explorer_html = ExplorerGraphiQL().html(None)


def _bearer_token():
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1].strip() or None


@bp.get("/graphql")
def graphql_explorer():
    return explorer_html, 200


@bp.post("/graphql")
def graphql_server():
    """
    Execute a GraphQL operation
    ---
    tags:
      - GraphQL
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            query: { type: string }
            variables: { type: object }
            operationName: { type: string }
    responses:
      200:
        description: Operation executed (resolver errors are reported in "errors")
      400:
        description: Malformed request or query
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400, description="Request body must be a JSON object")

    services = current_app.extensions["profile_api"]
    context = {
        "request": request,
        "token": _bearer_token(),
        "auth_service": services["auth_service"],
        "token_signer": services["token_signer"],
    }

    success, result = graphql_sync(
        schema,
        data,
        context_value=context,
        debug=current_app.debug,
        error_formatter=format_graphql_error,
    )
    status_code = 200 if success else 400
    return jsonify(result), status_code
