# Schema-based request validation
from typing import Any, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError

from blog_api.errors import RequestValidationFailed

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def validate_payload(schema: Type[SchemaT], payload: Any) -> SchemaT:
    """Check payload against schema, raising RequestValidationFailed on any mismatch"""
    if not isinstance(payload, Mapping):
        raise RequestValidationFailed(detail=[{"loc": [], "msg": "Request body must be an object"}])

    try:
        return schema.model_validate(dict(payload))
    except ValidationError as exc:
        detail = [
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in exc.errors(include_url=False)
        ]
        raise RequestValidationFailed(detail=detail) from exc
