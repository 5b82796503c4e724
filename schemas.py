"""Request bodies accepted by the API.

Clients speak camelCase; handlers receive ``model_dump(exclude_unset=True)``
output with snake_case keys, so partial updates only carry what was sent.
"""

import re
from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

HEX_COLOR = r"^#[0-9a-fA-F]{6}$"

ProjectStatus = Literal['ACTIVE', 'PLANNING', 'IN_PROGRESS', 'ON_HOLD', 'COMPLETED']
Priority = Literal['P0', 'P1', 'P2', 'P3']
Severity = Literal['S0', 'S1', 'S2', 'S3']
PomodoroType = Literal['FOCUS', 'SHORT_BREAK', 'LONG_BREAK']


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    def changes(self):
        return self.model_dump(exclude_unset=True)


def strip_text(value):
    return value.strip() if isinstance(value, str) else value


def check_password_strength(value):
    if len(value) < 8:
        raise ValueError('Password must be at least 8 characters')
    if not re.search(r"[A-Za-z]", value) or not re.search(r"\d", value):
        raise ValueError('Password must contain a letter and a digit')
    return value


Email = Annotated[EmailStr, BeforeValidator(strip_text), AfterValidator(str.lower)]
Password = Annotated[str, AfterValidator(check_password_strength)]


# -- auth and profile

class RegisterRequest(ApiModel):
    email: Email
    password: Password
    name: str = Field(min_length=1, max_length=200)

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, value):
        if not value.strip():
            raise ValueError('Name is required')
        return value.strip()


class LoginRequest(ApiModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserSettings(ApiModel):
    theme: Literal['light', 'dark', 'system'] = 'system'
    email_notifications: bool = True
    push_notifications: bool = True


class ProfileUpdate(ApiModel):
    name: str = Field(min_length=2, max_length=200)
    email: Email
    image: Optional[str] = None
    settings: Optional[UserSettings] = None

    @field_validator('image')
    @classmethod
    def image_url(cls, value):
        if value in (None, ''):
            return None
        if not value.startswith(('http://', 'https://')):
            raise ValueError('Invalid image URL')
        return value


class PasswordChange(ApiModel):
    current_password: str = Field(min_length=1)
    new_password: Password


# -- organizations and projects

class OrganizationCreate(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    order: Optional[int] = None


class OrganizationUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    order: Optional[int] = None


class ProjectCreate(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    status: ProjectStatus = 'ACTIVE'
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    due_date: Optional[datetime] = None
    organization_id: Optional[int] = None


class ProjectUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    due_date: Optional[datetime] = None
    organization_id: Optional[int] = None


# -- tasks and kanban columns

class TaskCreate(ApiModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    status: ProjectStatus = 'ACTIVE'
    priority: Priority = 'P1'
    severity: Severity = 'S1'
    due_date: Optional[datetime] = None
    project_id: Optional[int] = None
    parent_id: Optional[int] = None
    column_id: Optional[int] = None


class TaskUpdate(ApiModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    priority: Optional[Priority] = None
    severity: Optional[Severity] = None
    due_date: Optional[datetime] = None
    project_id: Optional[int] = None
    parent_id: Optional[int] = None
    column_id: Optional[int] = None


class TaskMove(ApiModel):
    column_id: Union[int, str]

    @field_validator('column_id')
    @classmethod
    def as_key(cls, value):
        value = str(value).strip()
        if not value:
            raise ValueError('Column ID is required')
        return value


class ColumnCreate(ApiModel):
    name: str = Field(min_length=1, max_length=100)
    color: str = Field(pattern=HEX_COLOR)
    order: int
    project_id: Optional[int] = None


class ColumnUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    order: Optional[int] = None


# -- notes

class NoteCreate(ApiModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = ''
    tags: Union[str, List[str]] = ''
    project_id: Optional[int] = None
    task_id: Optional[int] = None


class NoteUpdate(ApiModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = None
    tags: Optional[Union[str, List[str]]] = None
    project_id: Optional[int] = None
    task_id: Optional[int] = None


# -- habits

class HabitCreate(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    frequency: str = 'DAILY'
    target: int = Field(default=1, ge=1)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)


class HabitUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    frequency: Optional[str] = None
    target: Optional[int] = Field(default=None, ge=1)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)


class HabitToggle(ApiModel):
    completed: bool


# -- pomodoro

class PomodoroCreate(ApiModel):
    duration: int = Field(gt=0)
    type: PomodoroType = 'FOCUS'
    task_id: Optional[int] = None


class PomodoroUpdate(ApiModel):
    completed: Optional[bool] = None
    end_time: Optional[datetime] = None
