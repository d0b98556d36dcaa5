from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional

from ai_cofounder.core_models import StoredShapeRecord

# --- Error Model ---

class ErrorResponse(BaseModel):
    """Data for reporting an error to the frontend."""
    error_code: Optional[str] = Field(None, description="A unique code identifying the type of error.")
    error_message: str = Field(description="A user-friendly error message.")

# --- Auth ---

class RegisterRequest(BaseModel):
    email: str = Field("", description="Email address for the new account.")
    password: str = Field("", description="Account password.")
    name: Optional[str] = Field(None, max_length=200)

class RegisteredUser(BaseModel):
    id: str
    email: Optional[str] = None

class RegisterResponse(BaseModel):
    success: bool = True
    message: str = "User registered successfully"
    user: Optional[RegisteredUser] = None

# --- Chat ---

class ChatHistoryItem(BaseModel):
    """One earlier message as the frontend keeps it."""
    model_config = ConfigDict(populate_by_name=True)

    text: str = ""
    is_ai: bool = Field(False, alias="isAI")

class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = ""
    conversation_history: List[ChatHistoryItem] = Field(default_factory=list, alias="conversationHistory")
    project_id: str = Field("default", alias="projectId")

class CanvasObjectResponse(BaseModel):
    """A stored canvas object as sent to the canvas board."""
    id: int
    type: str
    parameters: Dict[str, Any]
    owner_id: str
    created_at: str

    @classmethod
    def from_record(cls, record: StoredShapeRecord) -> "CanvasObjectResponse":
        return cls(
            id=record.id,
            type=record.type.value,
            parameters=record.parameters,
            owner_id=record.owner_id,
            created_at=record.created_at.isoformat(),
        )

class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response: str = Field(description="Reply text with canvas commands removed.")
    success: bool
    canvas_objects: List[CanvasObjectResponse] = Field(default_factory=list, alias="canvasObjects")

class MessageResponse(BaseModel):
    id: int
    content: str
    role: Literal["user", "assistant"]
    created_at: str

class MessageListResponse(BaseModel):
    messages: List[MessageResponse]

# --- Search ---

class SearchRequest(BaseModel):
    query: str = ""
    limit: int = Field(5, ge=1, le=50)

class SearchResult(BaseModel):
    id: str
    score: float
    content: Optional[str] = None
    response: Optional[str] = None
    timestamp: Optional[str] = None

class SearchResponse(BaseModel):
    success: bool = True
    results: List[SearchResult] = Field(default_factory=list)

# --- Health ---

ServiceStatus = Literal["healthy", "error", "unconfigured", "unknown"]

class HealthServices(BaseModel):
    supabase: ServiceStatus = "unknown"
    openai: ServiceStatus = "unknown"
    vector_index: ServiceStatus = "unknown"

class HealthResponse(BaseModel):
    timestamp: str
    services: HealthServices
    overall: Literal["healthy", "degraded", "unknown"]

# --- Canvas ---

class CanvasObjectListResponse(BaseModel):
    objects: List[CanvasObjectResponse]

class CanvasObjectMoveRequest(BaseModel):
    x: float
    y: float

# --- Projects ---

class ProjectCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Name of the new project.")
    description: Optional[str] = Field(None, max_length=2000)

class ProjectResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    status: str = "active"
    created_at: str

class ProjectListResponse(BaseModel):
    projects: List[ProjectResponse]
