from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict


class AssignmentStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    assignment_id: uuid.UUID
    title: str
    total_submissions: int
    submission_rate: float
    average_grade: float


class RecentActivity(BaseModel):
    recent_submissions: int
    new_enrollments: int


class GradeDistribution(BaseModel):
    A: int = 0
    B: int = 0
    C: int = 0
    D: int = 0
    F: int = 0


class CoursePerformanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    course_id: uuid.UUID
    course_title: str
    total_students: int
    total_assignments: int
    total_submissions: int
    completion_rate: float
    submission_rate: float
    average_grade: float
    average_satisfaction: float
    assignment_stats: list[AssignmentStatsResponse]
    recent_activity: RecentActivity
    grade_distribution: GradeDistribution
