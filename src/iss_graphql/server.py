"""GraphQL execution and the FastAPI application serving it."""

import json
from typing import Any

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from graphql import GraphQLSchema, graphql_sync
from pydantic import BaseModel, ConfigDict, Field

logger = structlog.get_logger()

GRAPHIQL_HTML = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>MOEX ISS GraphQL</title>
  <link rel="stylesheet" href="https://unpkg.com/graphiql@3/graphiql.min.css">
</head>
<body style="margin: 0">
  <div id="graphiql" style="height: 100vh"></div>
  <script crossorigin src="https://unpkg.com/react@18/umd/react.production.min.js"></script>
  <script crossorigin src="https://unpkg.com/react-dom@18/umd/react-dom.production.min.js"></script>
  <script crossorigin src="https://unpkg.com/graphiql@3/graphiql.min.js"></script>
  <script>
    const fetcher = GraphiQL.createFetcher({ url: window.location.pathname });
    ReactDOM.createRoot(document.getElementById("graphiql"))
      .render(React.createElement(GraphiQL, { fetcher }));
  </script>
</body>
</html>
"""


class GraphQLRequest(BaseModel):
    """Standard GraphQL-over-HTTP request body."""

    model_config = ConfigDict(populate_by_name=True)

    query: str
    variables: dict[str, Any] | None = None
    operation_name: str | None = Field(default=None, alias="operationName")


def execute_query(
    schema: GraphQLSchema,
    query: str,
    variables: dict[str, Any] | None = None,
    operation_name: str | None = None,
) -> dict[str, Any]:
    """Execute a query and return the {data, errors} payload.

    Resolver failures show up as error entries next to partial data.
    """
    result = graphql_sync(
        schema, query, variable_values=variables, operation_name=operation_name
    )
    if result.errors:
        logger.warning(
            "query_errors",
            count=len(result.errors),
            messages=[error.message for error in result.errors],
        )
    return result.formatted


def create_app(schema: GraphQLSchema) -> FastAPI:
    """Create the FastAPI app exposing ``schema`` at /graphql."""
    app = FastAPI(title="MOEX ISS GraphQL", description="GraphQL gateway for the MOEX ISS API")

    # Sync handlers: resolvers block on requests, FastAPI runs them in its threadpool
    @app.post("/graphql")
    def graphql_post(request: GraphQLRequest) -> dict[str, Any]:
        return execute_query(schema, request.query, request.variables, request.operation_name)

    @app.get("/graphql", response_model=None)
    def graphql_get(
        query: str | None = None,
        variables: str | None = None,
        operationName: str | None = None,
    ) -> dict[str, Any] | HTMLResponse:
        if query is None:
            return HTMLResponse(GRAPHIQL_HTML)
        return execute_query(schema, query, _parse_variables(variables), operationName)

    return app


def _parse_variables(variables: str | None) -> dict[str, Any] | None:
    if not variables:
        return None
    try:
        parsed = json.loads(variables)
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"variables are not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise HTTPException(status_code=400, detail="variables must be a JSON object")
    return parsed
