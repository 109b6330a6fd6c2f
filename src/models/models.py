"""Data models for the Recipe Book service.

Defines Pydantic models for persisted recipes, user input, oracle suggestions
and the conversational transcript. All models use Pydantic v2.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.utils.errors import ErrorKind


class Recipe(BaseModel):
    """A persisted recipe row.

    ingredients and steps hold one item per line (see src.orchestrator.lines).
    id and created_at are assigned by the store and never change.
    """

    model_config = ConfigDict(frozen=True)

    id: Annotated[str, Field(min_length=1, description="Opaque identifier assigned by the store")]
    title: Annotated[str, Field(min_length=1, description="Recipe name")]
    ingredients: Annotated[str, Field("", description="Ingredients, one per line")]
    steps: Annotated[str, Field("", description="Preparation steps, one per line")]
    image_url: Annotated[Optional[str], Field(None, description="Public URL of the recipe image")]
    created_at: Annotated[Optional[datetime], Field(None, description="Creation timestamp assigned by the store")]

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        """Stores may hand back integer or UUID identifiers; keep them opaque."""
        return str(value) if value is not None else value

    @field_validator("ingredients", "steps", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return "" if value is None else value


class RecipeDraft(BaseModel):
    """User-editable recipe fields, as entered in a form."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = ""
    ingredients: str = ""
    steps: str = ""


class ImageUpload(BaseModel):
    """An image file supplied by the user."""

    data: Annotated[bytes, Field(repr=False)]
    filename: str = "image"


class RecipeSuggestion(BaseModel):
    """Structured recipe proposed by the suggestion oracle.

    Also used as the response schema sent to Gemini, so field descriptions
    double as instructions to the model.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Annotated[str, Field(min_length=1, max_length=200, description="Creative, appealing name of the recipe")]
    ingredients: Annotated[
        List[str],
        Field(description="Every ingredient needed, including quantities, one item per entry"),
    ]
    steps: Annotated[
        List[str],
        Field(description="Step-by-step guide to prepare and cook the dish, one step per entry"),
    ]


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class MessageState(str, Enum):
    AWAITING_DECISION = "awaiting_decision"


class Decision(str, Enum):
    """User answer to a pending suggestion."""

    ACCEPT = "accept"
    MODIFY = "modify"
    REJECT = "reject"


class ChatMessage(BaseModel):
    """One turn of the conversational transcript."""

    id: str
    role: Role
    content: str
    suggestion: Optional[RecipeSuggestion] = None
    state: Optional[MessageState] = None

    @property
    def awaiting_decision(self) -> bool:
        return self.state == MessageState.AWAITING_DECISION


class Notice(BaseModel):
    """User-visible outcome of an orchestrator action."""

    level: Literal["success", "warning", "error"]
    message: str
    kind: Optional[ErrorKind] = None


class ActionResult(BaseModel):
    """Result of a RecipeBook action: the affected recipe (if any) and a notice."""

    recipe: Optional[Recipe] = None
    notice: Notice

    @property
    def ok(self) -> bool:
        return self.notice.level != "error"
