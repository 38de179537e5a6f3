"""Shared fixtures: a small GraphQL schema with documents, and a pet store OpenAPI document."""

import copy

import pytest
from graphql import build_schema

from schemagen.core.documents import parse_documents

SDL = """
scalar DateTime
scalar Money

enum Role {
  ADMIN
  MEMBER
}

enum PostStatus {
  DRAFT
  PUBLISHED
}

interface Node {
  id: ID!
}

type User implements Node {
  id: ID!
  name: String
  email: String!
  role: Role!
  createdAt: DateTime
  balance: Money
  posts(first: Int): [Post!]!
  tags: [String]
}

type Post implements Node {
  id: ID!
  title: String!
  status: PostStatus
  author: User!
}

union SearchResult = User | Post

input UserFilter {
  role: Role
  nameContains: String
  nested: UserFilter
}

input CreateUserInput {
  name: String!
  email: String!
  role: Role = MEMBER
}

type Query {
  user(id: ID!): User
  users(filter: UserFilter, limit: Int): [User!]!
  node(id: ID!): Node
  search(term: String!): [SearchResult!]!
}

type Mutation {
  createUser(input: CreateUserInput!): User!
}
"""

DOCUMENTS = """
fragment UserFields on User {
  id
  name
  role
}

fragment UserWithPosts on User {
  ...UserFields
  posts {
    id
    title
    status
  }
}

query GetUser($id: ID!) {
  user(id: $id) {
    ...UserWithPosts
    email
  }
}

query ListUsers($filter: UserFilter, $limit: Int) {
  users(filter: $filter, limit: $limit) {
    id
    displayName: name
  }
}

query Search($term: String!) {
  search(term: $term) {
    __typename
    ... on User {
      id
      name
    }
    ... on Post {
      id
      title
    }
  }
}

query GetNode($id: ID!) {
  node(id: $id) {
    id
    ... on User {
      email
    }
    ... on Post {
      title
    }
  }
}

mutation CreateUser($input: CreateUserInput!) {
  createUser(input: $input) {
    id
    email
  }
}
"""

PETSTORE = {
    "openapi": "3.0.3",
    "info": {"title": "Pet Store", "version": "1.0.0"},
    "servers": [
        {"url": "https://{env}.example.com/v1", "variables": {"env": {"default": "api"}}},
    ],
    "paths": {
        "/pets": {
            "get": {
                "operationId": "listPets",
                "parameters": [
                    {"name": "limit", "in": "query", "schema": {"type": "integer"}},
                    {
                        "name": "status",
                        "in": "query",
                        "required": True,
                        "schema": {"$ref": "#/components/schemas/PetStatus"},
                    },
                ],
                "responses": {
                    "200": {
                        "description": "A list of pets",
                        "content": {
                            "application/json": {
                                "schema": {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}},
                            },
                        },
                    },
                },
            },
            "post": {
                "operationId": "createPet",
                "requestBody": {
                    "content": {"application/json": {"schema": {"$ref": "#/components/schemas/NewPet"}}},
                },
                "responses": {
                    "201": {
                        "description": "Created",
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}},
                    },
                },
            },
        },
        "/pets/{petId}": {
            "parameters": [
                {"name": "petId", "in": "path", "required": True, "schema": {"type": "string", "format": "uuid"}},
            ],
            "get": {
                "responses": {
                    "200": {
                        "description": "A pet",
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}},
                    },
                },
            },
        },
    },
    "components": {
        "schemas": {
            "PetStatus": {"type": "string", "enum": ["available", "sold"]},
            "Pet": {
                "type": "object",
                "required": ["id", "name"],
                "properties": {
                    "id": {"type": "string", "format": "uuid"},
                    "name": {"type": "string"},
                    "tag": {"type": "string", "nullable": True},
                    "status": {"$ref": "#/components/schemas/PetStatus"},
                    "owner": {"$ref": "#/components/schemas/Owner"},
                    "children": {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}},
                    "attributes": {"type": "object", "additionalProperties": {"type": "string"}},
                },
            },
            "Owner": {
                "type": "object",
                "properties": {"email": {"type": "string", "format": "email"}},
                "additionalProperties": True,
            },
            "NewPet": {
                "allOf": [
                    {"$ref": "#/components/schemas/Pet"},
                    {"type": "object", "properties": {"secret": {"type": "string"}}},
                ],
            },
            "Unused": {"type": "object", "properties": {"x": {"type": "string"}}},
        },
    },
}


@pytest.fixture
def gql_schema():
    """The sample GraphQL schema."""
    return build_schema(SDL)


@pytest.fixture
def documents():
    """The sample operations and fragments."""
    return parse_documents({"operations.graphql": DOCUMENTS})


@pytest.fixture
def petstore():
    """A fresh copy of the pet store OpenAPI document (not dereferenced)."""
    return copy.deepcopy(PETSTORE)


@pytest.fixture
def sdl():
    """The sample schema as SDL text."""
    return SDL
