from strawberry.fastapi import GraphQLRouter

from ledger_staging.api.graphql.schema import schema

graphql_router = GraphQLRouter(schema)
