"""
데이터베이스 엔진, 세션, 트랜잭션 및 재시도 유틸리티

The engine is owned by a ``Database`` instance created by the application
factory and stored on ``app.state.database``; request handlers obtain
sessions through the ``get_db`` dependency.
"""

import time
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import (
    DisconnectionError,
    InterfaceError,
    OperationalError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from bunyod_tour.logging_config import get_logger

logger = get_logger("database")

T = TypeVar("T")

# Connection-level failures worth another attempt
TRANSIENT_DB_ERRORS = (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError)


def build_engine(
    url: str,
    echo: bool = False,
    pool_size: int = 15,
    max_overflow: int = 25,
    pool_recycle: int = 1800,
) -> Engine:
    """URL 종류에 맞는 엔진 생성"""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}, "echo": echo}
        # in-memory databases live as long as their single connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    return create_engine(
        url,
        pool_size=pool_size,  # 연결 풀 크기
        max_overflow=max_overflow,  # 추가 연결 수 제한
        pool_timeout=60,  # 연결 대기 시간
        pool_pre_ping=True,  # 연결 상태 확인 활성화
        pool_recycle=pool_recycle,  # 30분마다 연결 재생성
        echo=echo,
        connect_args={
            "connect_timeout": 30,
            "application_name": "bunyod_tour_backend",
            "options": "-c statement_timeout=30000",  # 쿼리 타임아웃 (30초)
        },
    )


class Database:
    """Engine + session factory pair"""

    def __init__(self, url: str, **engine_options):
        self.url = url
        self.engine = build_engine(url, **engine_options)
        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)

    @classmethod
    def from_settings(cls, settings) -> "Database":
        return cls(
            settings.database_url,
            echo=settings.debug,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=settings.db_pool_recycle,
        )

    def create_all(self) -> None:
        from bunyod_tour.models import Base

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def check_connection(self) -> tuple[bool, str]:
        """데이터베이스 연결 상태 확인"""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True, "Database connection successful"
        except TRANSIENT_DB_ERRORS as e:
            logger.error(f"Database health check failed: {e}")
            return False, f"Database connection failed: {e}"

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.database


# 데이터베이스 의존성
def get_db(request: Request) -> Iterator[Session]:
    db = get_database(request).session()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def db_transaction(db: Session) -> Iterator[Session]:
    """트랜잭션 관리를 위한 컨텍스트 매니저

    Commits when the block succeeds, rolls back and re-raises otherwise.
    The session stays open for the caller.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def with_retry(
    operation: Callable[[], T],
    max_retries: int = 3,
    delay: float = 1.0,
    db: Session | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    일시적인 DB 오류 발생 시 선형 백오프로 재시도

    Args:
        operation: 실행할 함수 (인자 없음)
        max_retries: 최대 시도 횟수
        delay: 기본 대기 시간 (초). n번째 실패 후 n * delay 만큼 대기
        db: 재시도 전에 롤백할 세션
        sleep: 대기 함수

    Returns:
        operation의 반환값
    """

    def before_sleep(retry_state: RetryCallState) -> None:
        logger.warning(
            f"Transient database error (attempt {retry_state.attempt_number}/{max_retries}), "
            f"retrying in {retry_state.next_action.sleep}s: {retry_state.outcome.exception()}"
        )
        if db is not None:
            db.rollback()

    retrying = Retrying(
        retry=retry_if_exception_type(TRANSIENT_DB_ERRORS),
        stop=stop_after_attempt(max_retries),
        wait=wait_incrementing(start=delay, increment=delay),
        before_sleep=before_sleep,
        sleep=sleep,
        reraise=True,
    )
    try:
        return retrying(operation)
    except TRANSIENT_DB_ERRORS as exc:
        logger.error(f"Database operation failed after {max_retries} attempts: {exc}")
        raise
