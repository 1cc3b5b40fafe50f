"""
Policy codec.

Bidirectional conversion between the internal `PolicyDocument` model and
the JSON representation exchanged with the StorageGRID bucket policy
endpoint (`/org/containers/{name}/policy`).

Decoding is tolerant: list fields may arrive as a bare string and
principals come in four shapes. Encoding is canonical: list fields are
always arrays, and principal identifiers collapse to a bare string when
there is exactly one of them, which is what the grid expects.

Handled responsibilities:
    - Decoding of policy responses into `PolicyDocument` models
    - Encoding of `PolicyDocument` models into request payloads
    - Encoding of the "no policy" payload used to delete a policy
"""

import json
from typing import Any, Dict, Optional, Union

from app.core.errors import StructuralDecodeError
from app.models.policy import AwsPrincipal, Effect, PolicyDocument, Principal, Statement, WildcardPrincipal
from app.util.wire_values import decode_condition_map, decode_string, decode_string_list

POLICY = "policy"
DATA = "data"
ID = "Id"
VERSION = "Version"
STATEMENT = "Statement"
SID = "Sid"
EFFECT = "Effect"
ACTION = "Action"
NOT_ACTION = "NotAction"
RESOURCE = "Resource"
NOT_RESOURCE = "NotResource"
CONDITION = "Condition"
PRINCIPAL = "Principal"
NOT_PRINCIPAL = "NotPrincipal"
AWS = "AWS"
WILDCARD = "*"


# ------------------------------------------------------------------------------
# Decoding
# ------------------------------------------------------------------------------

def decode_policy(body: Union[bytes, str, dict]) -> Optional[PolicyDocument]:
    """
    Decodes a bucket policy payload.

    Both the request envelope (`{"policy": ...}`) and the read envelope
    returned by the grid (`{"data": {"policy": ...}}`) are accepted.

    Args:
        body (bytes | str | dict): Raw response body or already parsed JSON.

    Raises:
        StructuralDecodeError: If the payload or any statement is malformed.
            No partial document is returned.

    Returns:
        Optional[PolicyDocument]: The decoded document, or None when the
            payload carries `"policy": null`.
    """

    if isinstance(body, (bytes, str)):
        try:
            body = json.loads(body)
        except ValueError as e:
            raise StructuralDecodeError("$", f"invalid JSON: {e}")

    if not isinstance(body, dict):
        raise StructuralDecodeError("$", "expected object")

    if DATA in body and POLICY not in body:
        body = body[DATA]
        if not isinstance(body, dict):
            raise StructuralDecodeError(DATA, "expected object")

    raw = body.get(POLICY)
    if raw is None:
        return None
    return policy_from_wire(raw)


def policy_from_wire(raw: Any) -> PolicyDocument:
    """
    Converts a bare policy object (`{"Id", "Version", "Statement"}`) into a `PolicyDocument`.
    """

    if not isinstance(raw, dict):
        raise StructuralDecodeError(POLICY, "expected object")

    statements_raw = raw.get(STATEMENT)
    if statements_raw is None:
        statements_raw = []
    elif isinstance(statements_raw, dict):
        # single statement not wrapped in an array
        statements_raw = [statements_raw]
    elif not isinstance(statements_raw, list):
        raise StructuralDecodeError(STATEMENT, "expected array of statements")

    return PolicyDocument(
        id=decode_string(raw.get(ID), ID, default=""),
        version=decode_string(raw.get(VERSION), VERSION, default=""),
        statements=[statement_from_wire(s, f"{STATEMENT}[{i}]") for i, s in enumerate(statements_raw)],
    )


def statement_from_wire(raw: Any, path: str) -> Statement:
    """Converts one wire statement into a `Statement`. `path` prefixes error locations."""

    if not isinstance(raw, dict):
        raise StructuralDecodeError(path, "expected object")

    effect_raw = decode_string(raw.get(EFFECT), f"{path}.{EFFECT}")
    try:
        effect = Effect(effect_raw)
    except ValueError:
        raise StructuralDecodeError(f"{path}.{EFFECT}", f"expected 'Allow' or 'Deny', got {effect_raw!r}")

    return Statement(
        sid=decode_string(raw.get(SID), f"{path}.{SID}") or None,
        effect=effect,
        actions=decode_string_list(raw.get(ACTION), f"{path}.{ACTION}"),
        not_actions=decode_string_list(raw.get(NOT_ACTION), f"{path}.{NOT_ACTION}"),
        resources=decode_string_list(raw.get(RESOURCE), f"{path}.{RESOURCE}"),
        not_resources=decode_string_list(raw.get(NOT_RESOURCE), f"{path}.{NOT_RESOURCE}"),
        conditions=decode_condition_map(raw.get(CONDITION), f"{path}.{CONDITION}"),
        principal=principal_from_wire(raw.get(PRINCIPAL), f"{path}.{PRINCIPAL}"),
        not_principal=principal_from_wire(raw.get(NOT_PRINCIPAL), f"{path}.{NOT_PRINCIPAL}"),
    )


def principal_from_wire(raw: Any, path: str) -> Optional[Principal]:
    """
    Decodes a principal value.

    Recognised shapes:
        - absent / null       -> None
        - "*"                 -> WildcardPrincipal
        - {"AWS": "*"}        -> AwsPrincipal([])
        - {"AWS": "arn"}      -> AwsPrincipal(["arn"])
        - {"AWS": ["a", "b"]} -> AwsPrincipal(["a", "b"])
    """

    if raw is None:
        return None

    if raw == WILDCARD:
        return WildcardPrincipal()

    if isinstance(raw, dict) and set(raw) == {AWS}:
        identifiers = raw[AWS]
        if identifiers == WILDCARD:
            return AwsPrincipal(identifiers=[])
        if isinstance(identifiers, (str, list)):
            return AwsPrincipal(identifiers=decode_string_list(identifiers, f"{path}.{AWS}"))
        raise StructuralDecodeError(f"{path}.{AWS}", "expected string or list of strings")

    if isinstance(raw, dict):
        raise StructuralDecodeError(path, f"expected exactly one '{AWS}' key, got {sorted(raw)}")
    raise StructuralDecodeError(path, f"expected '{WILDCARD}' or an object with an '{AWS}' key")


# ------------------------------------------------------------------------------
# Encoding
# ------------------------------------------------------------------------------

def encode_policy(document: Optional[PolicyDocument]) -> bytes:
    """
    Encodes a policy document into the request body expected by the grid.

    Args:
        document (Optional[PolicyDocument]): Document to encode. None
            produces `{"policy": null}`, which removes the bucket policy.

    Returns:
        bytes: UTF-8 JSON body.
    """

    return json.dumps(policy_to_wire(document)).encode("utf-8")


def policy_to_wire(document: Optional[PolicyDocument]) -> Dict[str, Any]:
    """Builds the `{"policy": ...}` payload as a JSON-compatible dict."""

    if document is None:
        return {POLICY: None}

    return {
        POLICY: {
            ID: document.id,
            VERSION: document.version,
            STATEMENT: [statement_to_wire(s) for s in document.statements],
        }
    }


def statement_to_wire(statement: Statement) -> Dict[str, Any]:
    result: Dict[str, Any] = {EFFECT: statement.effect.value}
    if statement.sid:
        result[SID] = statement.sid

    # empty lists are left out: only one of each pair is meant to be set
    for key, values in (
        (ACTION, statement.actions),
        (NOT_ACTION, statement.not_actions),
        (RESOURCE, statement.resources),
        (NOT_RESOURCE, statement.not_resources),
    ):
        if values:
            result[key] = list(values)

    if statement.conditions:
        result[CONDITION] = {operator: dict(keys) for operator, keys in statement.conditions.items()}

    if statement.principal is not None:
        result[PRINCIPAL] = principal_to_wire(statement.principal)
    if statement.not_principal is not None:
        result[NOT_PRINCIPAL] = principal_to_wire(statement.not_principal)

    return result


def principal_to_wire(principal: Principal) -> Union[str, Dict[str, Any]]:
    """
    Encodes a principal.

    Unlike actions and resources, AWS identifiers collapse to a bare string
    when there is exactly one, and to `"*"` when there are none.
    """

    if isinstance(principal, WildcardPrincipal):
        return WILDCARD

    identifiers = principal.identifiers
    if len(identifiers) == 0:
        return {AWS: WILDCARD}
    if len(identifiers) == 1:
        return {AWS: identifiers[0]}
    return {AWS: list(identifiers)}
