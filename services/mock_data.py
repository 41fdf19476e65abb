"""Centralized mock data for development and testing.

Used by the dashboard services when the platform backend is not available
(``USE_MOCK_DATA=true``) or when an upstream call fails and
``MOCK_FALLBACK_ON_ERROR`` is on.

Static fixtures are plain functions so relative timestamps are computed at
call time. Randomized generators take a ``random.Random`` so callers (and
tests) control the seed.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

from models.analytics import ActivityItem, EngagementRecord, StudentSummary
from models.audit import AuditLogEntry
from models.classes import ClassDetail
from models.maintenance import BackupJob, IntegrityCheck, MaintenanceWindow, SystemHealth
from models.reflections import ReflectionContent, ReflectionSummary
from models.reports import ScheduledReport
from models.session_log import InterventionLog, LoggingTemplate, ObservationNote
from models.sessions import DebateSession, DebateTopic, StudentProfile
from models.system_settings import FeatureFlag, PlatformHealth, SystemSetting


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ── Session wizard ───────────────────────────────────────────

TOPICS = [
    {
        "id": "1",
        "title": "Should schools ban single-use plastics?",
        "description": (
            "Debate the environmental and practical implications of banning "
            "single-use plastics in educational institutions."
        ),
        "difficulty": "intermediate",
        "category": "Environment",
        "tags": ["sustainability", "policy", "health"],
        "estimated_duration": 45,
        "preparation_materials": [
            "environmental_impact_study.pdf", "plastic_alternatives_guide.pdf",
        ],
        "learning_objectives": [
            "Analyze environmental policies",
            "Evaluate cost-benefit trade-offs",
            "Present evidence-based arguments",
        ],
        "appropriateness": {"min_grade": 6, "max_grade": 12},
    },
    {
        "id": "2",
        "title": "Is artificial intelligence a threat to human creativity?",
        "description": "Explore the relationship between AI advancement and human creative expression.",
        "difficulty": "advanced",
        "category": "Technology",
        "tags": ["AI", "creativity", "future", "ethics"],
        "estimated_duration": 50,
        "preparation_materials": ["ai_creativity_research.pdf", "human_vs_ai_art.pdf"],
        "learning_objectives": [
            "Understand AI capabilities",
            "Analyze creative processes",
            "Discuss ethical implications",
        ],
        "appropriateness": {"min_grade": 9, "max_grade": 12},
    },
    {
        "id": "3",
        "title": "Should students have a say in their school curriculum?",
        "description": "Debate student autonomy and educational decision-making in schools.",
        "difficulty": "beginner",
        "category": "Education",
        "tags": ["democracy", "education", "youth-voice"],
        "estimated_duration": 35,
        "preparation_materials": ["student_voice_research.pdf"],
        "learning_objectives": [
            "Understand democratic participation",
            "Explore educational philosophy",
            "Practice civic engagement",
        ],
        "appropriateness": {"min_grade": 6, "max_grade": 10},
    },
]

STUDENTS = [
    {
        "id": "1",
        "first_name": "Sarah",
        "last_name": "Johnson",
        "email": "sarah.johnson@school.edu",
        "grade": "11",
        "class_id": "class1",
        "skill_level": {"critical_thinking": 85, "communication": 88, "research": 92},
        "debate_history": {
            "total_debates": 15, "win_rate": 73, "average_score": 86,
            "preferred_topics": ["Environment", "Technology"],
        },
        "availability": ["monday_pm", "tuesday_am", "thursday_pm"],
        "preferences": {
            "topic_interests": ["sustainability", "AI", "policy"],
            "learning_style": "visual",
        },
    },
    {
        "id": "2",
        "first_name": "Michael",
        "last_name": "Chen",
        "email": "michael.chen@school.edu",
        "grade": "11",
        "class_id": "class1",
        "skill_level": {"critical_thinking": 78, "communication": 82, "research": 75},
        "debate_history": {
            "total_debates": 12, "win_rate": 58, "average_score": 79,
            "preferred_topics": ["Technology", "Education"],
        },
        "availability": ["monday_am", "wednesday_pm", "friday_am"],
        "preferences": {
            "topic_interests": ["technology", "education", "ethics"],
            "learning_style": "auditory",
        },
    },
    {
        "id": "3",
        "first_name": "Emma",
        "last_name": "Davis",
        "email": "emma.davis@school.edu",
        "grade": "10",
        "class_id": "class1",
        "skill_level": {"critical_thinking": 65, "communication": 70, "research": 68},
        "debate_history": {
            "total_debates": 6, "win_rate": 33, "average_score": 68,
            "preferred_topics": ["Education"],
        },
        "availability": ["tuesday_pm", "thursday_am", "friday_pm"],
        "preferences": {
            "topic_interests": ["education", "democracy"],
            "learning_style": "kinesthetic",
        },
    },
]


def get_topics() -> list[DebateTopic]:
    return [DebateTopic.model_validate(t) for t in TOPICS]


def get_students() -> list[StudentProfile]:
    return [StudentProfile.model_validate(s) for s in STUDENTS]


# ── Session list ─────────────────────────────────────────────


def get_sessions(teacher_id: str, teacher_name: str = "") -> list[DebateSession]:
    now = _now()
    teacher = {"id": teacher_id, "name": teacher_name}
    raw = [
        {
            "id": "1",
            "title": "Environmental Policy Debate",
            "description": "Discussing plastic pollution and policy solutions",
            "topic": {
                "id": "topic1",
                "title": "Should schools ban single-use plastics?",
                "category": "Environment",
                "difficulty": "intermediate",
            },
            "format": "oxford",
            "status": "scheduled",
            "scheduled_date": now + timedelta(days=1),
            "scheduled_time": "14:30",
            "duration": 45,
            "participants": [
                {"id": "1", "first_name": "Sarah", "last_name": "Johnson"},
                {"id": "2", "first_name": "Michael", "last_name": "Chen"},
                {"id": "3", "first_name": "Emma", "last_name": "Davis"},
                {"id": "4", "first_name": "James", "last_name": "Wilson"},
            ],
            "teacher": teacher,
            "configuration": {
                "format": "oxford", "ai_coaching": True, "recording": True, "scoring": True,
            },
            "created_at": now - timedelta(hours=48),
            "updated_at": now - timedelta(hours=24),
        },
        {
            "id": "2",
            "title": "AI Ethics Discussion",
            "description": "Exploring the relationship between AI and human creativity",
            "topic": {
                "id": "topic2",
                "title": "Is artificial intelligence a threat to human creativity?",
                "category": "Technology",
                "difficulty": "advanced",
            },
            "format": "socratic",
            "status": "completed",
            "scheduled_date": now - timedelta(hours=48),
            "scheduled_time": "10:00",
            "duration": 50,
            "participants": [
                {"id": "1", "first_name": "Sarah", "last_name": "Johnson"},
                {"id": "2", "first_name": "Michael", "last_name": "Chen"},
                {"id": "5", "first_name": "Alex", "last_name": "Brown"},
                {"id": "6", "first_name": "Lisa", "last_name": "Taylor"},
            ],
            "teacher": teacher,
            "configuration": {
                "format": "socratic", "ai_coaching": True, "recording": True, "scoring": True,
            },
            "analytics": {"engagement": 87.5, "participation": 92.3, "completion_rate": 100},
            "created_at": now - timedelta(days=5),
            "updated_at": now - timedelta(hours=48),
        },
        {
            "id": "3",
            "title": "Student Voice in Education",
            "description": "Should students have more say in their curriculum?",
            "topic": {
                "id": "topic3",
                "title": "Should students have a say in their school curriculum?",
                "category": "Education",
                "difficulty": "beginner",
            },
            "format": "fishbowl",
            "status": "draft",
            "scheduled_date": now + timedelta(days=7),
            "scheduled_time": "13:00",
            "duration": 35,
            "participants": [
                {"id": "3", "first_name": "Emma", "last_name": "Davis"},
                {"id": "7", "first_name": "David", "last_name": "Kim"},
                {"id": "8", "first_name": "Sophie", "last_name": "Martinez"},
            ],
            "teacher": teacher,
            "configuration": {"format": "fishbowl"},
            "created_at": now,
            "updated_at": now,
        },
    ]
    return [DebateSession.model_validate(s) for s in raw]


# ── Classes ──────────────────────────────────────────────────

CLASSES = [
    {"id": "class1", "name": "Advanced Biology", "enrollmentCount": 28},
    {"id": "class2", "name": "World History", "enrollmentCount": 24},
    {"id": "class3", "name": "Civics & Debate", "enrollmentCount": 18},
]


def get_class_detail(class_id: str, teacher_id: str, teacher_name: str = "",
                     teacher_email: str = "") -> ClassDetail:
    now = _now()
    return ClassDetail.model_validate({
        "id": class_id,
        "name": "Advanced Biology",
        "description": (
            "Advanced placement biology with debate components focusing on ethical "
            "considerations in biotechnology and environmental science."
        ),
        "subject": "SCIENCE",
        "grade_level": "11",
        "academic_year": "2024-2025",
        "term": "FALL",
        "max_students": 30,
        "current_enrollment": 28,
        "is_active": True,
        "status": "active",
        "teacher": {"id": teacher_id, "name": teacher_name, "email": teacher_email},
        "organization": {"id": "org1", "name": "Lincoln High School"},
        "created_at": datetime(2024, 9, 1, tzinfo=timezone.utc),
        "updated_at": now,
        "last_activity": now - timedelta(hours=2),
        "average_engagement": 85.2,
        "total_debates": 12,
        "completion_rate": 78.5,
        "average_score": 82.3,
        "participation_rate": 94.6,
        "recent_debates": [
            {"id": "1", "topic": "Gene Editing Ethics", "date": now - timedelta(days=2),
             "participant_count": 24, "status": "completed"},
            {"id": "2", "topic": "Climate Change Solutions", "date": now - timedelta(days=5),
             "participant_count": 26, "status": "completed"},
            {"id": "3", "topic": "Biodiversity Conservation", "date": now + timedelta(days=3),
             "participant_count": 0, "status": "scheduled"},
        ],
        "schedule": {
            "meeting_times": [
                {"day_of_week": day, "start_time": "09:00", "end_time": "10:30"}
                for day in (1, 3, 5)
            ],
            "room": "Science Lab B-204",
            "virtual_meeting_url": "https://meet.example.com/advanced-bio",
        },
    })


# ── Analytics generators ─────────────────────────────────────


def generate_students(rng: random.Random, count: int = 12) -> list[StudentSummary]:
    now = _now()
    students = []
    for i in range(1, count + 1):
        risk = "high" if rng.random() > 0.8 else "medium" if rng.random() > 0.6 else "low"
        trend = "improving" if rng.random() > 0.6 else "stable" if rng.random() > 0.3 else "declining"
        students.append(StudentSummary(
            id=f"student-{i}",
            name=f"Student {i}",
            email=f"student{i}@school.edu",
            overall_progress=rng.random() * 0.6 + 0.3,
            last_activity=now - timedelta(seconds=rng.random() * 7 * 86400),
            completed_reflections=rng.randint(2, 9),
            average_quality=rng.random() * 0.4 + 0.6,
            risk_level=risk,
            strengths=["Critical Thinking", "Communication"][: rng.randint(1, 2)],
            needs_attention=["Research Skills", "Empathy"][: rng.randint(0, 1)],
            engagement_trend=trend,
        ))
    return students


def generate_reflections(rng: random.Random, count: int = 6) -> list[ReflectionSummary]:
    now = _now()
    reflections = []
    for i in range(1, count + 1):
        status = (
            "reviewed" if rng.random() > 0.7
            else "pending" if rng.random() > 0.3
            else "needs_revision"
        )
        priority = "high" if rng.random() > 0.7 else "medium" if rng.random() > 0.4 else "low"
        reflections.append(ReflectionSummary(
            id=f"reflection-{i}",
            student_name=f"Student {i}",
            student_id=f"student-{i}",
            debate_title=f"Debate Topic {i}",
            submitted_at=now - timedelta(seconds=rng.random() * 48 * 3600),
            review_status=status,
            quality_score=rng.random() * 0.4 + 0.6,
            word_count=rng.randint(200, 699),
            time_spent=rng.randint(15, 44),
            teacher_priority=priority,
        ))
    return reflections


ACTIVITY_TYPES = ("reflection_submitted", "debate_completed", "milestone_achieved")


def generate_activity(rng: random.Random, count: int = 8) -> list[ActivityItem]:
    now = _now()
    return [
        ActivityItem(
            type=rng.choice(ACTIVITY_TYPES),
            description=f"Student activity {i + 1}",
            timestamp=now - timedelta(hours=2 * i),
            student_id=f"student-{rng.randint(1, 5)}",
            priority="high" if rng.random() > 0.7 else "medium" if rng.random() > 0.4 else "low",
        )
        for i in range(count)
    ]


_RISK_BASE = {"high": 30, "medium": 60, "low": 80}


def generate_engagement(students: list[StudentSummary], days: int,
                        rng: random.Random) -> list[EngagementRecord]:
    today = _now().date()
    records = []
    for student in students:
        base = _RISK_BASE.get(student.risk_level, 60)
        for offset in range(days):
            score = max(0.0, min(100.0, base + (rng.random() - 0.5) * 40))
            records.append(EngagementRecord.model_validate({
                "student_id": student.id,
                "day_offset": offset,
                "date": today - timedelta(days=offset),
                "engagement_score": score,
                "activities": {
                    "debate_participation": rng.random() * 100,
                    "reflection_activity": rng.random() * 100,
                    "peer_interaction": rng.random() * 100,
                    "resource_access": rng.random() * 100,
                },
                "time_spent": rng.randint(15, 134),
                "quality_metrics": {
                    "message_quality": rng.random() * 100,
                    "response_depth": rng.random() * 100,
                    "collaboration_score": rng.random() * 100,
                },
            }))
    return records


# ── Reflections ──────────────────────────────────────────────


def get_reflection_content(reflection_id: str) -> ReflectionContent:
    return ReflectionContent.model_validate({
        "id": reflection_id,
        "responses": [
            {
                "question_id": "1",
                "question_text": "What did you learn about yourself during this debate?",
                "response": (
                    "I learned that I tend to get defensive when challenged on topics I care "
                    "deeply about. This debate helped me realize I need to work on staying "
                    "more open-minded and considering other perspectives, even when they "
                    "contradict my initial beliefs."
                ),
                "analysis_data": {
                    "sentiment": "positive",
                    "key_insights": ["Self-awareness", "Growth mindset", "Emotional regulation"],
                    "quality_metrics": {
                        "depth": 0.8, "clarity": 0.9, "engagement": 0.7, "self_awareness": 0.9,
                    },
                },
            },
            {
                "question_id": "2",
                "question_text": "How did your opinion change (if at all) during the debate?",
                "response": (
                    "While I still hold my original position, I gained a much better "
                    "understanding of why people might disagree. The opponent presented some "
                    "compelling evidence that I hadn't considered before, especially regarding "
                    "the economic implications."
                ),
                "analysis_data": {
                    "sentiment": "neutral",
                    "key_insights": [
                        "Opinion plasticity", "Evidence evaluation", "Perspective taking",
                    ],
                    "quality_metrics": {
                        "depth": 0.9, "clarity": 0.8, "engagement": 0.8, "self_awareness": 0.7,
                    },
                },
            },
        ],
        "ai_insights": {
            "overall_sentiment": "Positive and reflective",
            "learning_evidence": [
                "Demonstrates clear self-awareness about defensive tendencies",
                "Shows appreciation for opposing viewpoints",
                "Exhibits intellectual honesty about learning",
            ],
            "growth_areas": [
                "Could explore specific strategies for managing defensive reactions",
                "Might benefit from deeper analysis of evidence evaluation process",
            ],
            "strengths": ["High self-awareness", "Intellectual humility", "Clear communication"],
        },
    })


# ── Audit log ────────────────────────────────────────────────


def get_audit_logs() -> list[AuditLogEntry]:
    now = _now()
    raw = [
        {
            "id": "audit_1",
            "timestamp": now - timedelta(minutes=30),
            "user_id": "user_123",
            "user_email": "admin@school.edu",
            "user_name": "System Admin",
            "action": "login",
            "resource": "user",
            "resource_id": "user_123",
            "details": {
                "description": "Successful admin login from web interface",
                "response_code": 200,
                "execution_time": 234,
            },
            "metadata": {
                "device_info": {
                    "type": "desktop", "os": "Windows 11", "browser": "Chrome 120.0.0.0",
                    "timezone": "America/New_York", "language": "en-US",
                },
                "geolocation": {"country": "United States", "region": "New York", "city": "New York"},
            },
            "severity": "low",
            "category": "authentication",
            "outcome": "success",
            "ip_address": "192.168.1.100",
            "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
            "session_id": "session_abc123",
            "organization_id": "org_1",
            "tags": ["login", "admin", "web"],
            "retention": {"retention_period": 2555, "compliance_category": "regulated"},
        },
        {
            "id": "audit_2",
            "timestamp": now - timedelta(minutes=15),
            "user_id": "user_456",
            "user_email": "teacher@school.edu",
            "user_name": "Jane Smith",
            "action": "create",
            "resource": "session",
            "resource_id": "session_789",
            "details": {
                "description": 'Created new debate session: "Climate Change Discussion"',
                "new_values": {
                    "topic": "Climate Change Discussion",
                    "participants": 24,
                    "scheduledFor": (now + timedelta(days=2)).isoformat(),
                },
                "affected_entities": ["class_101", "students_24"],
                "execution_time": 456,
            },
            "metadata": {
                "device_info": {
                    "type": "desktop", "os": "macOS 14.0", "browser": "Safari 17.0",
                    "timezone": "America/New_York", "language": "en-US",
                },
            },
            "severity": "low",
            "category": "data_modification",
            "outcome": "success",
            "ip_address": "192.168.1.101",
            "user_agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15",
            "session_id": "session_def456",
            "organization_id": "org_1",
            "tags": ["session", "create", "debate"],
            "retention": {"retention_period": 1825, "compliance_category": "standard"},
        },
        {
            "id": "audit_3",
            "timestamp": now - timedelta(minutes=5),
            "user_id": "user_789",
            "user_email": "hacker@malicious.com",
            "user_name": "Unknown",
            "action": "login",
            "resource": "user",
            "resource_id": "attempted_user",
            "details": {
                "description": "Failed login attempt - invalid credentials",
                "error_message": "Authentication failed: Invalid username or password",
                "response_code": 401,
                "execution_time": 123,
            },
            "metadata": {
                "device_info": {
                    "type": "desktop", "os": "Linux", "browser": "Firefox 120.0",
                    "timezone": "UTC", "language": "en-US",
                },
                "geolocation": {"country": "Russia", "region": "Moscow", "city": "Moscow"},
            },
            "severity": "high",
            "category": "security",
            "outcome": "failure",
            "ip_address": "203.0.113.45",
            "user_agent": "Mozilla/5.0 (X11; Linux x86_64; rv:120.0) Gecko/20100101 Firefox/120.0",
            "session_id": "session_failed",
            "organization_id": "org_1",
            "tags": ["failed_login", "security", "suspicious"],
            "retention": {"retention_period": 2555, "compliance_category": "regulated"},
        },
        {
            "id": "audit_4",
            "timestamp": now - timedelta(minutes=2),
            "user_id": "system",
            "user_email": "system@bothsides.app",
            "user_name": "System",
            "action": "backup",
            "resource": "system",
            "resource_id": "database_backup",
            "details": {
                "description": "Automated database backup completed successfully",
                "data_size": 2048576000,
                "execution_time": 45000,
                "affected_entities": ["users", "sessions", "analytics"],
            },
            "metadata": {"source": "batch_job"},
            "severity": "low",
            "category": "system_admin",
            "outcome": "success",
            "ip_address": "10.0.0.1",
            "user_agent": "System/1.0",
            "session_id": "system_job_123",
            "organization_id": "org_1",
            "tags": ["backup", "automated", "system"],
            "retention": {"retention_period": 365, "compliance_category": "standard"},
        },
    ]
    entries = [AuditLogEntry.model_validate(e) for e in raw]
    return sorted(entries, key=lambda e: e.timestamp, reverse=True)


STREAM_ACTIONS = ("login", "logout", "create", "update", "delete", "read")
STREAM_RESOURCES = ("user", "session", "class", "debate", "analytics")
STREAM_SEVERITIES = ("low", "medium", "high", "critical")
STREAM_OUTCOMES = ("success", "failure", "warning")


def generate_audit_entry(rng: random.Random) -> AuditLogEntry:
    action = rng.choice(STREAM_ACTIONS)
    resource = rng.choice(STREAM_RESOURCES)
    return AuditLogEntry.model_validate({
        "id": f"audit_{int(_now().timestamp() * 1000)}_{rng.getrandbits(36):09x}",
        "timestamp": _now(),
        "user_id": f"user_{rng.randrange(1000)}",
        "user_email": f"user{rng.randrange(1000)}@school.edu",
        "user_name": f"User {rng.randrange(1000)}",
        "action": action,
        "resource": resource,
        "resource_id": f"{resource}_{rng.randrange(1000)}",
        "details": {
            "description": f"Real-time {action} operation on {resource}",
            "execution_time": rng.randrange(1000),
        },
        "severity": rng.choice(STREAM_SEVERITIES),
        "category": "data_access",
        "outcome": rng.choice(STREAM_OUTCOMES),
        "ip_address": f"192.168.1.{rng.randrange(255)}",
        "user_agent": "Mozilla/5.0 (Real-time Stream)",
        "session_id": f"session_{rng.getrandbits(36):09x}",
        "organization_id": "org_1",
        "tags": [action, resource, "real-time"],
    })


# ── Backup & maintenance ─────────────────────────────────────

MIB = 1024 * 1024


def get_backup_jobs() -> list[BackupJob]:
    now = _now()
    raw = [
        {
            "id": "backup_1",
            "name": "Daily Full Backup",
            "description": "Complete system backup including database and files",
            "type": "full",
            "source": {
                "type": "database",
                "includes": ["users", "sessions", "classes", "analytics"],
                "excludes": ["temp_data", "cache"],
            },
            "destination": {
                "type": "s3",
                "location": "s3://bothsides-backups/daily",
                "region": "us-east-1",
                "bucket": "bothsides-backups",
                "path": "/daily",
            },
            "schedule": {"frequency": "daily", "time_of_day": "02:00"},
            "retention": {"storage_limit_gb": 500},
            "status": "completed",
            "history": [
                {
                    "id": "hist_1",
                    "backup_job_id": "backup_1",
                    "started_at": now - timedelta(hours=22),
                    "completed_at": now - timedelta(hours=21, minutes=32),
                    "duration_minutes": 28,
                    "status": "completed",
                    "size_bytes": 2048 * MIB,
                    "files_count": 15420,
                    "destination_path": "s3://bothsides-backups/daily/backup_20240115_020000.tar.gz",
                    "checksum": "sha256:a1b2c3d4e5f6",
                    "verification_status": "passed",
                },
            ],
            "created_at": now - timedelta(days=30),
            "updated_at": now - timedelta(hours=21),
            "last_run": now - timedelta(hours=22),
            "next_run": now + timedelta(hours=2),
            "created_by": "admin",
        },
        {
            "id": "backup_2",
            "name": "Incremental User Data",
            "description": "Hourly incremental backup of user-generated content",
            "type": "incremental",
            "source": {"type": "user_data", "includes": ["uploads", "reflections"]},
            "destination": {"type": "local", "location": "/var/backups/incremental"},
            "schedule": {"frequency": "hourly"},
            "status": "running",
            "progress": {
                "stage": "backing_up",
                "percentage": 67,
                "current_file": "uploads/reflections/2024/01/reflection_1234.json",
                "files_processed": 670,
                "files_total": 1000,
                "bytes_processed": 670 * MIB,
                "bytes_total": 1000 * MIB,
                "speed_mbps": 12.5,
                "eta_minutes": 4,
                "started_at": now - timedelta(minutes=8),
            },
            "created_at": now - timedelta(days=14),
            "updated_at": now,
            "last_run": now - timedelta(hours=1),
            "next_run": now + timedelta(hours=1),
            "created_by": "admin",
        },
    ]
    return [BackupJob.model_validate(j) for j in raw]


def get_maintenance_windows() -> list[MaintenanceWindow]:
    now = _now()
    start = now + timedelta(days=7)
    past = now - timedelta(days=3)

    def task(i: int, name: str, type_: str, minutes: int, status: str = "pending") -> dict:
        return {
            "id": f"task_{i}", "name": name, "type": type_, "order": i,
            "estimated_duration_minutes": minutes, "status": status,
        }

    raw = [
        {
            "id": "maint_1",
            "name": "Monthly System Updates",
            "description": "Apply security patches and system updates",
            "type": "routine",
            "status": "scheduled",
            "impact_level": "medium",
            "affected_services": ["web_app", "api", "database"],
            "start_time": start,
            "end_time": start + timedelta(hours=2),
            "notification_settings": {
                "advance_notice_hours": [72, 24, 2],
                "notification_channels": ["email", "in_app"],
                "user_groups": ["all_users"],
            },
            "tasks": [
                task(1, "Enable Maintenance Mode", "configuration", 2),
                task(2, "Apply Security Patches", "deployment", 45),
                task(3, "Database Migration", "database", 30),
                task(4, "Service Restart", "service_restart", 10),
                task(5, "Disable Maintenance Mode", "configuration", 2),
            ],
            "created_by": "admin",
            "created_at": now - timedelta(days=14),
            "updated_at": now - timedelta(days=1),
        },
        {
            "id": "maint_2",
            "name": "Emergency Database Repair",
            "description": "Fix critical database corruption issue",
            "type": "emergency",
            "status": "completed",
            "impact_level": "high",
            "affected_services": ["database", "api"],
            "start_time": past,
            "end_time": past + timedelta(hours=1),
            "tasks": [
                task(1, "Emergency Maintenance Mode", "configuration", 1, "completed"),
                task(2, "Database Corruption Repair", "database", 45, "completed"),
                task(3, "System Recovery", "service_restart", 15, "completed"),
            ],
            "created_by": "admin",
            "created_at": past - timedelta(hours=1),
            "updated_at": past + timedelta(hours=1),
        },
    ]
    return [MaintenanceWindow.model_validate(w) for w in raw]


def get_integrity_checks() -> list[IntegrityCheck]:
    now = _now()
    raw = [
        {
            "id": "check_1",
            "name": "Database Consistency Check",
            "description": "Verify referential integrity and detect orphaned records",
            "type": "database",
            "status": "completed",
            "last_run": now - timedelta(hours=6),
            "next_run": now + timedelta(hours=18),
            "results": [
                {
                    "id": "result_1",
                    "check_id": "check_1",
                    "timestamp": now - timedelta(hours=6),
                    "status": "passed",
                    "score": 98,
                    "issues_found": [
                        {
                            "type": "orphaned_record",
                            "severity": "low",
                            "message": "3 orphaned session records found",
                            "location": "sessions table",
                            "recommended_action": "Clean up orphaned records during maintenance",
                            "auto_repairable": True,
                        },
                    ],
                    "duration_ms": 12456,
                    "details": {"tables_checked": 24, "records_checked": 156789},
                },
            ],
            "auto_repair": True,
            "created_at": now - timedelta(days=30),
            "updated_at": now - timedelta(hours=6),
        },
        {
            "id": "check_2",
            "name": "File System Integrity",
            "description": "Check file permissions and storage capacity",
            "type": "file_system",
            "status": "scheduled",
            "last_run": now - timedelta(days=1),
            "next_run": now + timedelta(hours=12),
            "results": [
                {
                    "id": "result_2",
                    "check_id": "check_2",
                    "timestamp": now - timedelta(days=1),
                    "status": "warning",
                    "score": 85,
                    "issues_found": [
                        {
                            "type": "permission_issue",
                            "severity": "medium",
                            "message": "Incorrect permissions on 12 files",
                            "location": "/app/uploads/user_content/",
                            "recommended_action": "Reset file permissions to 644",
                            "auto_repairable": True,
                        },
                        {
                            "type": "disk_space",
                            "severity": "low",
                            "message": "Upload directory is 78% full",
                            "location": "/app/uploads/",
                            "recommended_action": "Archive old uploads",
                            "auto_repairable": False,
                        },
                    ],
                    "duration_ms": 8432,
                },
            ],
            "created_at": now - timedelta(days=20),
            "updated_at": now - timedelta(days=1),
        },
    ]
    return [IntegrityCheck.model_validate(c) for c in raw]


def get_system_health(windows: list[MaintenanceWindow] | None = None) -> SystemHealth:
    now = _now()
    windows = windows if windows is not None else get_maintenance_windows()
    return SystemHealth.model_validate({
        "overall_status": "healthy",
        "last_updated": now,
        "uptime_percentage": 99.8,
        "backup_status": {
            "last_successful_backup": now - timedelta(hours=22),
            "failed_backups_24h": 0,
            "average_backup_duration_minutes": 28,
            "storage_usage_gb": 156.7,
            "next_scheduled_backup": now + timedelta(hours=2),
        },
        "maintenance_status": {
            "maintenance_mode": False,
            "upcoming_maintenance": [w for w in windows if w.status == "scheduled"],
            "overdue_maintenance": 0,
            "average_maintenance_duration_hours": 1.2,
        },
        "integrity_status": {
            "issues_detected": 3,
            "critical_issues": 0,
            "last_integrity_check": now - timedelta(hours=6),
            "auto_repairs_applied_24h": 1,
            "integrity_score": 98,
        },
        "storage_usage": {
            "backup_storage_gb": 156.7,
            "backup_storage_limit_gb": 500.0,
            "database_size_gb": 8.4,
            "file_storage_gb": 12.3,
            "temp_storage_gb": 2.1,
            "available_storage_gb": 245.8,
        },
        "performance_metrics": {
            "backup_speed_mbps": 12.5,
            "database_response_time_ms": 45,
            "file_system_io_ops": 1250,
            "memory_usage_percentage": 67,
            "cpu_usage_percentage": 23,
        },
    })


# ── System settings ──────────────────────────────────────────


def get_settings_catalog() -> list[SystemSetting]:
    now = _now()
    raw = [
        {
            "id": "setting_1",
            "category": "general",
            "key": "site_name",
            "name": "Site Name",
            "description": "The name of your organization displayed throughout the application",
            "type": "string",
            "value": "Both Sides Academy",
            "default_value": "Both Sides",
            "validation": {"required": True, "min_length": 1, "max_length": 100},
            "access_level": "organization",
            "last_modified": now - timedelta(days=7),
            "modified_by": "admin",
            "change_history": [
                {
                    "timestamp": now - timedelta(days=7),
                    "user_id": "admin_1",
                    "user_name": "System Admin",
                    "old_value": "Both Sides",
                    "new_value": "Both Sides Academy",
                    "reason": "Updated branding",
                },
            ],
            "metadata": {
                "tags": ["branding", "display"],
                "help_text": "This name appears in the header, emails, and reports",
                "impact_level": "low",
                "preview_supported": True,
            },
        },
        {
            "id": "setting_2",
            "category": "security",
            "key": "session_timeout",
            "name": "Session Timeout",
            "description": "How long user sessions remain active (in minutes)",
            "type": "number",
            "value": 480,
            "default_value": 240,
            "validation": {
                "required": True,
                "min_value": 15,
                "max_value": 1440,
                "error_message": "Session timeout must be between 15 minutes and 24 hours",
            },
            "access_level": "system",
            "last_modified": now - timedelta(days=2),
            "modified_by": "admin",
            "metadata": {
                "tags": ["security", "authentication"],
                "help_text": "Longer sessions improve user experience but may pose security risks",
                "impact_level": "medium",
            },
        },
        {
            "id": "setting_3",
            "category": "features",
            "key": "enable_ai_coaching",
            "name": "AI Coaching",
            "description": "Enable AI-powered coaching and suggestions during debates",
            "type": "boolean",
            "value": True,
            "default_value": False,
            "validation": {"required": True},
            "access_level": "organization",
            "feature_flag": "ai_coaching_v2",
            "last_modified": now - timedelta(days=1),
            "modified_by": "teacher_1",
            "metadata": {
                "tags": ["ai", "features", "education"],
                "help_text": (
                    "AI coaching provides real-time suggestions to help students "
                    "improve their debate skills"
                ),
                "impact_level": "high",
                "preview_supported": True,
            },
        },
        {
            "id": "setting_4",
            "category": "performance",
            "key": "max_concurrent_sessions",
            "name": "Max Concurrent Sessions",
            "description": "Maximum number of concurrent debate sessions allowed",
            "type": "number",
            "value": 50,
            "default_value": 25,
            "validation": {"required": True, "min_value": 1, "max_value": 500},
            "access_level": "system",
            "environment_specific": True,
            "restart_required": True,
            "last_modified": now - timedelta(days=5),
            "modified_by": "admin",
            "metadata": {
                "tags": ["performance", "scaling", "limits"],
                "help_text": (
                    "Higher limits require more server resources. "
                    "Monitor system performance carefully."
                ),
                "impact_level": "critical",
            },
        },
        {
            "id": "setting_5",
            "category": "notifications",
            "key": "email_notifications_enabled",
            "name": "Email Notifications",
            "description": "Send email notifications for important events",
            "type": "boolean",
            "value": True,
            "default_value": True,
            "validation": {"required": True},
            "access_level": "organization",
            "last_modified": now,
            "modified_by": "admin",
            "metadata": {
                "tags": ["notifications", "email"],
                "help_text": "Users can still control individual notification preferences",
                "impact_level": "low",
            },
        },
        {
            "id": "setting_6",
            "category": "ui_customization",
            "key": "primary_color",
            "name": "Primary Color",
            "description": "Primary brand color used throughout the interface",
            "type": "color",
            "value": "#3b82f6",
            "default_value": "#3b82f6",
            "validation": {"required": True, "pattern": "^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"},
            "access_level": "organization",
            "last_modified": now,
            "modified_by": "admin",
            "metadata": {
                "tags": ["ui", "branding", "color"],
                "help_text": "This color will be used for buttons, links, and accents",
                "impact_level": "low",
                "preview_supported": True,
            },
        },
    ]
    return [SystemSetting.model_validate(s) for s in raw]


def get_feature_flags() -> list[FeatureFlag]:
    now = _now()
    raw = [
        {
            "id": "flag_1",
            "name": "AI Coaching v2",
            "description": "Enhanced AI coaching with advanced natural language processing",
            "key": "ai_coaching_v2",
            "enabled": True,
            "rollout_percentage": 75,
            "target_groups": ["teachers", "premium_users"],
            "conditions": [{"type": "role", "operator": "in", "value": ["teacher", "admin"]}],
            "schedule": {
                "start_date": now - timedelta(days=14),
                "rollout_schedule": [
                    {"percentage": 25, "date": now - timedelta(days=14), "duration_hours": 24},
                    {"percentage": 50, "date": now - timedelta(days=7), "duration_hours": 24},
                    {"percentage": 75, "date": now - timedelta(days=3), "duration_hours": 72},
                ],
            },
            "metrics": {
                "adoption_rate": 68.4,
                "error_rate": 0.2,
                "performance_impact": -3.1,
                "user_satisfaction": 4.7,
            },
            "created_at": now - timedelta(days=21),
            "updated_at": now - timedelta(days=3),
            "created_by": "product_manager",
            "status": "active",
        },
        {
            "id": "flag_2",
            "name": "Advanced Analytics Dashboard",
            "description": "New analytics dashboard with machine learning insights",
            "key": "advanced_analytics",
            "enabled": False,
            "rollout_percentage": 0,
            "target_groups": ["admins", "data_analysts"],
            "conditions": [
                {"type": "role", "operator": "equals", "value": "admin"},
                {"type": "plan", "operator": "in", "value": ["enterprise", "premium"]},
            ],
            "created_at": now - timedelta(days=7),
            "updated_at": now - timedelta(days=1),
            "created_by": "product_manager",
            "status": "draft",
        },
    ]
    return [FeatureFlag.model_validate(f) for f in raw]


def get_platform_health() -> PlatformHealth:
    return PlatformHealth(
        status="healthy",
        uptime=99.7,
        cpu_usage=23.4,
        memory_usage=67.8,
        disk_usage=45.2,
        active_connections=1247,
        response_time=145,
        error_rate=0.08,
        last_backup=_now() - timedelta(hours=6),
        pending_updates=3,
    )


# ── Session documentation ────────────────────────────────────


def get_logging_templates() -> list[LoggingTemplate]:
    raw = [
        {
            "id": "1",
            "name": "Positive Recognition",
            "type": "observation",
            "category": "positive",
            "template": "Student demonstrated [SKILL] by [SPECIFIC_EXAMPLE]. This shows growth in [AREA].",
            "quick_fill_fields": [
                {"field": "SKILL", "options": [
                    "critical thinking", "respectful communication", "evidence use",
                    "collaboration", "leadership",
                ]},
                {"field": "AREA", "options": [
                    "academic skills", "social skills", "debate technique",
                    "research ability", "confidence",
                ]},
            ],
            "auto_tags": ["positive", "achievement"],
            "default_visibility": "parent_visible",
        },
        {
            "id": "2",
            "name": "Behavioral Concern",
            "type": "observation",
            "category": "concern",
            "template": (
                "Observed [BEHAVIOR] during [CONTEXT]. Potential impact: [IMPACT]. "
                "Recommended action: [ACTION]."
            ),
            "quick_fill_fields": [
                {"field": "BEHAVIOR", "options": [
                    "interrupting", "off-topic comments", "disrespectful language",
                    "lack of participation",
                ]},
                {"field": "CONTEXT", "options": [
                    "opening statements", "cross-examination", "group work",
                    "whole class discussion",
                ]},
                {"field": "ACTION", "options": [
                    "private conversation", "skill practice", "peer support",
                    "modified expectations",
                ]},
            ],
            "auto_tags": ["concern", "behavior"],
            "default_visibility": "teacher_only",
            "requires_follow_up": True,
        },
        {
            "id": "3",
            "name": "Safety Incident",
            "type": "incident",
            "category": "safety_concern",
            "template": (
                "Safety incident occurred at [TIME] involving [PARTICIPANTS]. "
                "Description: [DESCRIPTION]. Immediate actions taken: [ACTIONS]. "
                "Follow-up required: [FOLLOWUP]."
            ),
            "quick_fill_fields": [
                {"field": "ACTIONS", "options": [
                    "stopped activity", "separated participants",
                    "called administration", "provided first aid",
                ]},
                {"field": "FOLLOWUP", "options": [
                    "parent notification", "administrative meeting",
                    "counseling referral", "policy review",
                ]},
            ],
            "auto_tags": ["safety", "critical"],
            "default_visibility": "internal",
            "requires_follow_up": True,
        },
    ]
    return [LoggingTemplate.model_validate(t) for t in raw]


def get_seed_observations(participants: list[tuple[str, str]]) -> list[ObservationNote]:
    """Demonstration notes for a fresh log; ``participants`` is (id, name) pairs."""
    now = _now()
    first = participants[0] if participants else (None, None)
    second = participants[1] if len(participants) > 1 else (None, None)
    return [
        ObservationNote(
            id="1",
            timestamp=now - timedelta(minutes=5),
            category="concern",
            participant_id=second[0],
            participant_name=second[1],
            title="Difficulty with Perspective Taking",
            content=(
                "Student struggled to articulate opposing viewpoints fairly. "
                "May benefit from perspective-taking exercises."
            ),
            tags=["empathy", "perspective_taking", "skill_development"],
            visibility="teacher_only",
            priority="medium",
            follow_up_needed=True,
            follow_up_date=now + timedelta(days=7),
        ),
        ObservationNote(
            id="2",
            timestamp=now - timedelta(minutes=10),
            category="positive",
            participant_id=first[0],
            participant_name=first[1],
            title="Excellent Evidence Use",
            content=(
                "Student demonstrated outstanding ability to cite credible sources "
                "and explain their relevance to the argument."
            ),
            tags=["evidence", "critical_thinking", "research_skills"],
            visibility="parent_visible",
            priority="medium",
        ),
    ]


def get_seed_interventions(participants: list[tuple[str, str]]) -> list[InterventionLog]:
    pid, name = participants[1] if len(participants) > 1 else ("p1", "Student")
    return [
        InterventionLog(
            id="1",
            timestamp=_now() - timedelta(minutes=8),
            type="support",
            participant_id=pid,
            participant_name=name,
            reason="Student appeared confused about debate structure",
            action="Provided private guidance on argument organization",
            severity="low",
            outcome="successful",
        ),
    ]


# ── Reports ──────────────────────────────────────────────────


def get_scheduled_reports() -> list[ScheduledReport]:
    return [
        ScheduledReport(
            id="1",
            name="Weekly Class Summary",
            schedule="Every Friday at 4 PM",
            recipients=["principal@school.edu", "coordinator@school.edu"],
            last_sent=_now() - timedelta(days=7),
        ),
    ]
