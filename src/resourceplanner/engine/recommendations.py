"""
Recommendation Generator

Turns a utilization figure into a short, ordered list of actions for a
resource manager. Bands are evaluated top-down and never overlap:

- > 120%        critical overallocation, emergency redistribution
- 100% - 120%   redistribute, adjust timelines when periods are problematic
- 90% - 100%    monitor, keep a buffer, review priorities across projects
- 70% - 89%     optimal, optional note about spare capacity
- 50% - 69%     consider additional assignments, development opportunity
- 1% - 49%      significant under-utilization
- 0%            no current assignments
"""

from typing import List

from resourceplanner.engine.models import DEFAULT_WEEKLY_CAPACITY, NON_PROJECT_HOURS_PER_WEEK, Recommendation
from resourceplanner.engine.models import RecommendationPriority as Priority
from resourceplanner.engine.utilization import round_half_away

DEFAULT_EFFECTIVE_CAPACITY = DEFAULT_WEEKLY_CAPACITY - NON_PROJECT_HOURS_PER_WEEK


class RecommendationGenerator:
    """Builds recommendation records for a single utilization figure."""

    def generate(
        self,
        utilization_percent: int,
        problematic_period_count: int = 0,
        contributing_project_count: int = 0,
        effective_weekly_capacity: float = DEFAULT_EFFECTIVE_CAPACITY,
    ) -> List[Recommendation]:
        """
        Generate recommendations for a utilization percentage.

        Args:
            utilization_percent: Utilization as computed upstream (peak week)
            problematic_period_count: Weeks flagged as over or under loaded
            contributing_project_count: Distinct projects the resource works on
            effective_weekly_capacity: Hours per week the percentage refers to,
                used to express the excess in hours

        Returns:
            Ordered list of recommendations, most urgent first
        """
        u = utilization_percent
        spare = round_half_away(100 - u)

        if u > 120:
            excess = round_half_away(u - 100)
            excess_hours = round_half_away((u - 100) / 100 * effective_weekly_capacity)
            return [
                Recommendation(
                    type="critical",
                    priority=Priority.CRITICAL,
                    title="Critical Overallocation - Immediate Action Required",
                    description=(
                        f"Resource is critically overallocated at {u}%. Immediate workload "
                        f"redistribution is essential to prevent burnout and maintain quality."
                    ),
                ),
                Recommendation(
                    type="redistribute",
                    priority=Priority.HIGH,
                    title="Emergency Workload Redistribution",
                    description=(
                        f"Redistribute {excess}% of workload (approximately {excess_hours} hours) "
                        f"to other team members immediately."
                    ),
                ),
            ]

        if u > 100:
            recommendations = [
                Recommendation(
                    type="redistribute",
                    priority=Priority.HIGH,
                    title="Redistribute Workload",
                    description=(
                        f"Resource is {u}% allocated. Consider redistributing {round_half_away(u - 100)}% "
                        f"to other team members to maintain sustainable workload."
                    ),
                ),
            ]
            if problematic_period_count > 0:
                recommendations.append(Recommendation(
                    type="timeline",
                    priority=Priority.MEDIUM,
                    title="Adjust Project Timelines",
                    description=(
                        f"{problematic_period_count} periods are problematic. Consider extending "
                        f"deadlines or staggering project starts."
                    ),
                ))
            return recommendations

        if u >= 90:
            recommendations = [
                Recommendation(
                    type="monitor",
                    priority=Priority.MEDIUM,
                    title="Monitor Capacity Closely",
                    description=(
                        f"Resource is at {u}% capacity. Monitor workload closely and avoid "
                        f"additional assignments without careful planning."
                    ),
                ),
                Recommendation(
                    type="buffer",
                    priority=Priority.MEDIUM,
                    title="Maintain Buffer Capacity",
                    description=(
                        f"Consider maintaining {spare}% buffer for unexpected urgent tasks "
                        f"or project scope changes."
                    ),
                ),
            ]
            if contributing_project_count > 1:
                recommendations.append(Recommendation(
                    type="prioritize",
                    priority=Priority.LOW,
                    title="Review Project Priorities",
                    description=(
                        f"Resource is working on {contributing_project_count} projects. Review "
                        f"priorities to ensure focus on most critical deliverables."
                    ),
                ))
            return recommendations

        if u >= 70:
            recommendations = [
                Recommendation(
                    type="optimal",
                    priority=Priority.LOW,
                    title="Optimal Utilization",
                    description=(
                        f"Resource is optimally utilized at {u}%. Current allocation provides "
                        f"good productivity while maintaining flexibility."
                    ),
                ),
            ]
            if u < 85:
                recommendations.append(Recommendation(
                    type="opportunity",
                    priority=Priority.LOW,
                    title="Capacity for Additional Work",
                    description=(
                        f"{spare}% capacity available for additional high-priority tasks "
                        f"or professional development activities."
                    ),
                ))
            return recommendations

        if u >= 50:
            return [
                Recommendation(
                    type="assign",
                    priority=Priority.MEDIUM,
                    title="Consider Additional Assignments",
                    description=(
                        f"Resource has {spare}% available capacity. Consider assigning to "
                        f"high-priority projects or strategic initiatives."
                    ),
                ),
                Recommendation(
                    type="development",
                    priority=Priority.LOW,
                    title="Professional Development Opportunity",
                    description=(
                        "Available capacity could be used for training, mentoring, "
                        "or process improvement activities."
                    ),
                ),
            ]

        if u > 0:
            return [
                Recommendation(
                    type="assign",
                    priority=Priority.HIGH,
                    title="Significant Under-utilization",
                    description=(
                        f"Resource has {spare}% available capacity. Review project "
                        f"assignments and consider additional responsibilities."
                    ),
                ),
            ]

        return [
            Recommendation(
                type="assign",
                priority=Priority.HIGH,
                title="No Current Assignments",
                description=(
                    "Resource has no current project allocations. Assign to active "
                    "projects or consider strategic initiatives."
                ),
            ),
        ]
