"""
Domain Enums - Business domain enumerations
"""

from enum import Enum


class UserRole(str, Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class AuthProvider(str, Enum):
    LOCAL = "local"
    GOOGLE = "google"


class ResourceStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ResourceType(str, Enum):
    ASSIGNMENTS = "Assignments"
    QUIZZES = "Quizzes"
    PROJECTS = "Projects"
    PRESENTATIONS = "Presentations"
    NOTES = "Notes"
    PAST_PAPERS = "Past Papers"


class ResourceCounter(str, Enum):
    DOWNLOADS = "download_count"
    VIEWS = "view_count"


class Department(str, Enum):
    COMPUTER_SCIENCE = "Computer Science"
    BUSINESS_ADMINISTRATION = "Business Administration"
    ENGINEERING = "Engineering"
    MATHEMATICS = "Mathematics"
    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"
    ENGLISH = "English"
    ECONOMICS = "Economics"
    LAW = "Law"
    MEDICINE = "Medicine"


class MessageType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
