"""FastAPI dependencies — validate raw request bodies against record models.

Usage:
    @router.post("/orders")
    async def create_order(order: Order = Depends(validated_body(Order))):
        ...
"""

from typing import Awaitable, Callable, Optional, TypeVar

from fastapi import Request
from pydantic import BaseModel

from jsonvalidator.engine.validator import Validator
from jsonvalidator.engine.validator import validator as default_validator

ModelT = TypeVar("ModelT", bound=BaseModel)


def validated_body(
    target: type[ModelT],
    validator: Optional[Validator] = None,
) -> Callable[[Request], Awaitable[ModelT]]:
    """Dependency returning the request body validated and decoded as `target`.

    Failures propagate as `JsonValidatorError` subclasses; register
    `install_exception_handlers` to turn them into JSON responses.
    """
    engine = validator or default_validator
    engine.analyze(target)

    async def dependency(request: Request) -> ModelT:
        body = await request.body()
        return engine.validate(body, target)

    return dependency
