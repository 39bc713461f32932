"""JSON serialization/deserialization for the Bisaya++ AST.

This module converts between the AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Every node keeps its source line and
column so that runtime errors raised while executing a loaded AST still point
into the original program.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Assign,
    Binary,
    Block,
    Branch,
    Conditional,
    ExprStmt,
    ForLoop,
    Grouping,
    Input,
    Literal,
    Postfix,
    Print,
    Unary,
    VarDecl,
    VarItem,
    Variable,
    WhileLoop,
)
from .types import DeclaredType, Value, ValueKind


def value_to_obj(v: Value) -> Dict[str, Any]:
    return {"kind": v.kind.value, "data": v.data}


def value_from_obj(o: Dict[str, Any]) -> Value:
    return Value(ValueKind(o["kind"]), o.get("data"))


def _pos(node: Any) -> Dict[str, Any]:
    return {"line": node.line, "column": node.column}


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements], **_pos(node)}
    if isinstance(node, Print):
        return {"type": "Print", "parts": [ast_to_obj(p) for p in node.parts], **_pos(node)}
    if isinstance(node, Input):
        return {"type": "Input", "names": list(node.names), **_pos(node)}
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expr": ast_to_obj(node.expr), **_pos(node)}
    if isinstance(node, VarDecl):
        return {
            "type": "VarDecl",
            "declared_type": node.declared_type.value,
            "items": [{"name": item.name, "init": ast_to_obj(item.init)} for item in node.items],
            **_pos(node),
        }
    if isinstance(node, Conditional):
        return {
            "type": "Conditional",
            "branches": [
                {"condition": ast_to_obj(b.condition), "block": ast_to_obj(b.block)}
                for b in node.branches
            ],
            **_pos(node),
        }
    if isinstance(node, ForLoop):
        return {
            "type": "ForLoop",
            "init": ast_to_obj(node.init),
            "condition": ast_to_obj(node.condition),
            "update": ast_to_obj(node.update),
            "body": ast_to_obj(node.body),
            **_pos(node),
        }
    if isinstance(node, WhileLoop):
        return {
            "type": "WhileLoop",
            "condition": ast_to_obj(node.condition),
            "body": ast_to_obj(node.body),
            **_pos(node),
        }
    if isinstance(node, Literal):
        return {"type": "Literal", "value": value_to_obj(node.value), **_pos(node)}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": node.name, **_pos(node)}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": node.name, "value": ast_to_obj(node.value), **_pos(node)}
    if isinstance(node, Binary):
        return {
            "type": "Binary",
            "op": node.op,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
            **_pos(node),
        }
    if isinstance(node, Unary):
        return {"type": "Unary", "op": node.op, "operand": ast_to_obj(node.operand), **_pos(node)}
    if isinstance(node, Postfix):
        return {"type": "Postfix", "op": node.op, "operand": ast_to_obj(node.operand), **_pos(node)}
    if isinstance(node, Grouping):
        return {"type": "Grouping", "inner": ast_to_obj(node.inner), **_pos(node)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict) or "type" not in obj:
        raise ValueError(f"Malformed AST object: {obj!r}")

    t = obj["type"]
    pos = {"line": obj.get("line", 0), "column": obj.get("column", 0)}

    if t == "Block":
        return Block(tuple(ast_from_obj(s) for s in obj["statements"]), **pos)
    if t == "Print":
        return Print(tuple(ast_from_obj(p) for p in obj["parts"]), **pos)
    if t == "Input":
        return Input(tuple(obj["names"]), **pos)
    if t == "ExprStmt":
        return ExprStmt(ast_from_obj(obj["expr"]), **pos)
    if t == "VarDecl":
        return VarDecl(
            DeclaredType(obj["declared_type"]),
            tuple(VarItem(item["name"], ast_from_obj(item.get("init"))) for item in obj["items"]),
            **pos,
        )
    if t == "Conditional":
        return Conditional(
            tuple(Branch(ast_from_obj(b.get("condition")), ast_from_obj(b["block"])) for b in obj["branches"]),
            **pos,
        )
    if t == "ForLoop":
        return ForLoop(
            ast_from_obj(obj["init"]),
            ast_from_obj(obj["condition"]),
            ast_from_obj(obj["update"]),
            ast_from_obj(obj["body"]),
            **pos,
        )
    if t == "WhileLoop":
        return WhileLoop(ast_from_obj(obj["condition"]), ast_from_obj(obj["body"]), **pos)
    if t == "Literal":
        return Literal(value_from_obj(obj["value"]), **pos)
    if t == "Variable":
        return Variable(obj["name"], **pos)
    if t == "Assign":
        return Assign(obj["name"], ast_from_obj(obj["value"]), **pos)
    if t == "Binary":
        return Binary(ast_from_obj(obj["left"]), obj["op"], ast_from_obj(obj["right"]), **pos)
    if t == "Unary":
        return Unary(obj["op"], ast_from_obj(obj["operand"]), **pos)
    if t == "Postfix":
        return Postfix(ast_from_obj(obj["operand"]), obj["op"], **pos)
    if t == "Grouping":
        return Grouping(ast_from_obj(obj["inner"]), **pos)

    raise ValueError(f"Unknown AST node type: {t}")
