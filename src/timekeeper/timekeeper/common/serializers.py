"""JSON shapes for the session views returned by the API."""

from __future__ import annotations

from ..sessions import (
    AbsenceEntry,
    DaySummary,
    LateEntry,
    Member,
    PresenceRow,
    Session,
    WeekSummary,
    format_duration,
)


def session_to_dict(s: Session) -> dict:
    return {
        "clockIn": s.start.isoformat(),
        "clockOut": None if s.is_active else s.end.isoformat(),
        "durationSeconds": int(s.duration_seconds),
        "duration": format_duration(s.duration_seconds),
        "isActive": s.is_active,
    }


def day_to_dict(d: DaySummary) -> dict:
    return {
        "date": d.date.isoformat() if d.date else None,
        "status": d.status.value,
        "isLate": d.is_late,
        "isLive": d.is_live,
        "totalSeconds": int(d.total_duration_seconds),
        "totalTime": format_duration(d.total_duration_seconds),
        "sessions": [session_to_dict(s) for s in d.sessions],
    }


def week_to_dict(w: WeekSummary) -> dict:
    return {
        "weekStart": w.week_start.isoformat(),
        "weekEnd": w.week_end.isoformat(),
        "weekTotalSeconds": int(w.total_duration_seconds),
        "weekTotal": format_duration(w.total_duration_seconds),
        "dailyData": [day_to_dict(d) for d in w.days],
    }


def member_to_dict(m: Member) -> dict:
    return {"id": m.user_id, "name": m.name, "email": m.email, "profileURL": m.profile_url}


def presence_to_dict(row: PresenceRow) -> dict:
    return {
        **member_to_dict(row.member),
        "status": row.status.value,
        "totalMinutes": row.total_minutes,
        "formattedTime": row.formatted_time,
        "isCurrentlyClockedIn": row.is_currently_clocked_in,
        "lastClockIn": row.last_clock_in.isoformat() if row.last_clock_in else None,
        "workplace": row.workplace.value if row.workplace else None,
    }


def late_to_dict(entry: LateEntry) -> dict:
    return {
        **member_to_dict(entry.member),
        "date": entry.date.isoformat(),
        "clockInTime": entry.clock_in_time.isoformat(),
        "lateMinutes": entry.late_minutes,
    }


def absence_to_dict(entry: AbsenceEntry) -> dict:
    return {**member_to_dict(entry.member), "date": entry.date.isoformat(), "reason": entry.reason}
