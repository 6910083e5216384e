from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .activities.mysql_activity_repository import MySQLActivityRepository
from .activities.service import ActivityService
from .auth.session_gate import SessionGate
from .core.constants import MAX_IMAGE_BYTES, PASSWORD_HASH_METHOD
from .credentials.hashing import PasswordHasher
from .credentials.service import CredentialService
from .database.connection import DatabaseConnection, DBConfig
from .notifications.mailer import Notifier
from .payroll.service import PayrollService
from .scholars.mysql_scholar_repository import MySQLScholarRepository
from .scholars.service import ProfileService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    scholars_repo: MySQLScholarRepository
    activities_repo: MySQLActivityRepository
    notifier: Notifier
    session_gate: SessionGate

    credential_service: CredentialService
    profile_service: ProfileService
    payroll_service: PayrollService
    activity_service: ActivityService


def build_container(
    *,
    db_config: dict,
    notifier: Notifier,
    password_hash_method: str = PASSWORD_HASH_METHOD,
    max_image_bytes: int = MAX_IMAGE_BYTES,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    scholars_repo = MySQLScholarRepository(conn)
    activities_repo = MySQLActivityRepository(conn)

    credential_service = CredentialService(
        scholars_repo,
        notifier,
        hasher=PasswordHasher(password_hash_method),
    )
    profile_service = ProfileService(scholars_repo)
    payroll_service = PayrollService(scholars_repo)
    activity_service = ActivityService(activities_repo, max_image_bytes=max_image_bytes)

    return Container(
        conn=conn,
        scholars_repo=scholars_repo,
        activities_repo=activities_repo,
        notifier=notifier,
        session_gate=SessionGate(),
        credential_service=credential_service,
        profile_service=profile_service,
        payroll_service=payroll_service,
        activity_service=activity_service,
    )
