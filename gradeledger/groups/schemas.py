"""Request and response schemas for review groups."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..directory.schemas import Profile


class StudentGroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    member_ids: Optional[List[str]] = None


class StudentGroupMembersUpdate(BaseModel):
    member_ids: List[str]


class GraderGroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    grader_ids: List[str]


class GraderGroupUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    grader_ids: Optional[List[str]] = None


class GroupBundleCreate(BaseModel):
    student_group_id: str
    grader_group_id: str
    notes: Optional[str] = None


class StudentGroupResponse(BaseModel):
    id: str
    class_id: str
    name: str
    description: str = ""
    member_ids: List[str] = []
    members: List[Optional[Profile]] = []

    model_config = ConfigDict(from_attributes=True)


class GraderGroupResponse(BaseModel):
    id: str
    class_id: str
    name: str
    description: str = ""
    grader_ids: List[str] = []
    graders: List[Optional[Profile]] = []

    model_config = ConfigDict(from_attributes=True)


class GroupBundleResponse(BaseModel):
    id: str
    class_id: str
    student_group_id: str
    grader_group_id: str
    notes: str = ""
    student_group: Optional[StudentGroupResponse] = None
    grader_group: Optional[GraderGroupResponse] = None

    model_config = ConfigDict(from_attributes=True)
