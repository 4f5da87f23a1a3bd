from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr


class AssignmentPayload(BaseModel):
    """Create/update body. Types are strict: ``true`` is not a number, ``1`` is not a name."""

    model_config = ConfigDict(extra="ignore")

    name: StrictStr = Field(min_length=1, max_length=200)
    active: StrictBool
    points: Union[StrictInt, StrictFloat]
    challenge_pts: Union[StrictInt, StrictFloat]


class AssignmentResponse(BaseModel):
    id: int
    name: str
    active: bool
    points: float
    challenge_pts: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AssignmentCreated(BaseModel):
    message: str
    id: int


class MessageResponse(BaseModel):
    message: str


class TaskResponse(BaseModel):
    id: int
    task_name: str
    category_id: int
    assignment_id: int

    model_config = {"from_attributes": True}


class AssignmentStartResponse(BaseModel):
    message: str
    task_count: int


class StudentTaskResponse(BaseModel):
    student: str
    assignment_id: int
    task_id: int
    task_number: int
    task_name: str

    model_config = {"from_attributes": True}


class CurrentTaskResponse(BaseModel):
    student: str
    assignment_id: int
    task_id: int
    task_name: str

    model_config = {"from_attributes": True}
