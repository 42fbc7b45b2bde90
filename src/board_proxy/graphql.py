"""
GraphQL documents sent upstream.

Every value that comes from a caller travels in ``variables``; the documents
themselves are constants.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Union

Identifier = Union[str, int]

ADD_FILE_TO_COLUMN = """
mutation addFile($file: File!, $item_id: ID!, $column_id: String!) {
  add_file_to_column(item_id: $item_id, column_id: $column_id, file: $file) {
    id
  }
}
""".strip()

CREATE_ITEM = """
mutation createItem($board_id: ID!, $item_name: String!) {
  create_item(board_id: $board_id, item_name: $item_name) {
    id
  }
}
""".strip()

CREATE_SUBITEM = """
mutation createSubitem($parent_item_id: ID!, $item_name: String!) {
  create_subitem(parent_item_id: $parent_item_id, item_name: $item_name) {
    id
  }
}
""".strip()


@dataclass(frozen=True)
class GraphQLOperation:
    """A document plus the variables bound to it."""
    query: str
    variables: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        return {"query": self.query, "variables": dict(self.variables)}


def create_item_operation(board_id: Identifier, item_name: str) -> GraphQLOperation:
    return GraphQLOperation(
        query=CREATE_ITEM,
        variables={"board_id": str(board_id), "item_name": item_name},
    )


def create_subitem_operation(parent_item_id: Identifier, item_name: str) -> GraphQLOperation:
    return GraphQLOperation(
        query=CREATE_SUBITEM,
        variables={"parent_item_id": str(parent_item_id), "item_name": item_name},
    )


def add_file_operation(item_id: Identifier, column_id: str) -> GraphQLOperation:
    # the file slot is filled by the multipart map, not by JSON
    return GraphQLOperation(
        query=ADD_FILE_TO_COLUMN,
        variables={"item_id": str(item_id), "column_id": column_id, "file": None},
    )
