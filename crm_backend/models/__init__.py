"""
models/__init__.py
------------------
Re-export all models so create_tables.py (and Alembic's env.py) can import
Base and discover all tables via a single import:

    from crm_backend.models import Base
"""

from crm_backend.db.base import Base
from crm_backend.models.company import Company
from crm_backend.models.user import PRIVILEGED_ROLES, User, UserRole
from crm_backend.models.client import Client
from crm_backend.models.contact import Contact
from crm_backend.models.lead import Lead, LeadSource, LeadStatus, LeadStatusLog
from crm_backend.models.interaction import Interaction, InteractionContact, InteractionType
from crm_backend.models.note import Note
from crm_backend.models.task import Task, TaskStatus
from crm_backend.models.media import Media, MediaType
from crm_backend.models.category import Category
from crm_backend.models.template import Template, TemplateType
from crm_backend.models.content import Content, ContentStatus, ContentTag, ContentVisibility
from crm_backend.models.tag import Tag
from crm_backend.models.blog import Audience, Blog, BlogCategory
from crm_backend.models.course import Course, CourseCategory

__all__ = [
    "Base",
    "Company",
    "User",
    "UserRole",
    "PRIVILEGED_ROLES",
    "Client",
    "Contact",
    "Lead",
    "LeadSource",
    "LeadStatus",
    "LeadStatusLog",
    "Interaction",
    "InteractionContact",
    "InteractionType",
    "Note",
    "Task",
    "TaskStatus",
    "Media",
    "MediaType",
    "Category",
    "Template",
    "TemplateType",
    "Content",
    "ContentStatus",
    "ContentTag",
    "ContentVisibility",
    "Tag",
    "Audience",
    "Blog",
    "BlogCategory",
    "Course",
    "CourseCategory",
]
