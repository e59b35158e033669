# ============================================================
# Request pipeline
# ------------------------------------------------------------
# One orchestration shape for every generation endpoint:
#   empty-body -> parse -> extract -> invoke -> map outcome
# Routes are data (ROUTES); adding an operation means adding a row.
# ============================================================

from __future__ import annotations
import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, Field, StrictStr, ValidationError

from src.generate.operations import GenerationOperation
from src.generate.types import ErrorKind, GenerationOutcome, Ok
from src.logging_config import get_logger

logger = get_logger(__name__)

EMPTY_BODY = "Request body cannot be empty."
INVALID_JSON = "Invalid JSON format in request body."
BODY_READ_ERROR = "Request body error"

CLIENT_ERRORS = frozenset({ErrorKind.INVALID_INPUT, ErrorKind.SAFETY_BLOCKED, ErrorKind.MALFORMED_OUTPUT})


# ------------------------------------------------------------
# Request models (field extractors)
# ------------------------------------------------------------
class CommentRequest(BaseModel):
    context: StrictStr = Field(min_length=1)

    def args(self) -> Tuple[Any, ...]:
        return (self.context,)


class PostContentRequest(BaseModel):
    theme: StrictStr = Field(min_length=1)

    def args(self) -> Tuple[Any, ...]:
        return (self.theme,)


class ElaborationRequest(BaseModel):
    theme: StrictStr = Field(min_length=1)
    original_post_context: Optional[StrictStr] = Field(default="", alias="originalPostContext")

    def args(self) -> Tuple[Any, ...]:
        return (self.theme, self.original_post_context or "")


class ReplyRequest(BaseModel):
    parent_comment_text: StrictStr = Field(alias="parentCommentText", min_length=1)

    def args(self) -> Tuple[Any, ...]:
        return (self.parent_comment_text,)


@dataclass(frozen=True)
class Route:
    operation_id: str
    request_model: Type[BaseModel]
    success_key: str
    context_label: str


ROUTES: Dict[str, Route] = {
    "generate-comment": Route("comments", CommentRequest, "comments", "comments"),
    "generate-post-content": Route("post_content", PostContentRequest, "postText", "post content"),
    "elaborate-post": Route("elaboration", ElaborationRequest, "elaborationText", "elaboration"),
    "generate-reply": Route("reply", ReplyRequest, "replyText", "reply"),
}


class ExtractionError(ValueError):
    pass


def extract(model: Type[BaseModel], data: Any) -> BaseModel:
    """Validate parsed JSON against a request model; non-objects count as {}."""
    if not isinstance(data, dict):
        data = {}
    try:
        return model.model_validate(data)
    except ValidationError as e:
        loc = e.errors()[0].get("loc") or ()
        field = str(loc[0]) if loc else "body"
        raise ExtractionError(f"Request body must contain a '{field}' field as a string.") from e


def error_body(message: str) -> Dict[str, str]:
    return {"error": message}


class RequestPipeline:
    def __init__(self, operations: Mapping[str, GenerationOperation], routes: Mapping[str, Route] = ROUTES):
        self.operations = operations
        self.routes = routes

    def outcome_to_response(self, route: Route, outcome: GenerationOutcome) -> Tuple[int, Dict[str, Any]]:
        if isinstance(outcome, Ok):
            return 200, {route.success_key: outcome.value}
        status = 400 if outcome.error.kind in CLIENT_ERRORS else 500
        return status, error_body(f"Failed to generate {route.context_label}: {outcome.error.message}")

    async def handle(self, slug: str, body: Optional[bytes]) -> Tuple[int, Dict[str, Any]]:
        route = self.routes[slug]
        try:
            if not body:
                return 400, error_body(EMPTY_BODY)
            try:
                data = json.loads(body)
            except (ValueError, RecursionError):
                return 400, error_body(INVALID_JSON)
            try:
                request = extract(route.request_model, data)
            except ExtractionError as e:
                return 400, error_body(str(e))

            operation = self.operations[route.operation_id]
            outcome = await operation.run(*request.args())
            return self.outcome_to_response(route, outcome)
        except Exception:
            logger.exception("internal error processing %s", route.context_label)
            return 500, error_body(f"Internal server error processing {route.context_label}.")
