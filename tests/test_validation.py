"""
Tests for the deployment validator.
"""

from dispatch_sim.systems.validation import RequirementStatus, validate_deployment


def labels(check):
    return [r.label for r in check.problems]


class TestValidateDeployment:
    """Tests for deployment rules and preview."""

    def test_valid_team(self, team_mission, walker, flyer):
        check = validate_deployment(team_mission, [walker, flyer])
        assert check.feasible
        assert check.problems == []
        assert check.summary == "Ready to deploy."
        assert all(r.status == RequirementStatus.MET for r in check.requirements)

    def test_empty_team(self, short_mission):
        check = validate_deployment(short_mission, [])
        assert not check.feasible
        assert labels(check) == ["At least one agent"]
        assert check.success_probability == 0.0
        assert check.time_breakdown.total_time == 0

    def test_too_many_agents(self, short_mission, walker, flyer):
        check = validate_deployment(short_mission, [walker, flyer])
        assert not check.feasible
        assert labels(check) == ["At most 1 agent(s)"]
        assert "exceeds the limit of 1" in check.summary

    def test_duplicate_agents(self, team_mission, walker):
        check = validate_deployment(team_mission, [walker, walker])
        assert labels(check) == ["No duplicate agents"]
        assert "Walker" in check.summary

    def test_excluded_agent(self, team_mission, grounded_flyer):
        check = validate_deployment(team_mission, [grounded_flyer])
        assert labels(check) == ["No excluded agents"]
        assert "Grounded" in check.summary

    def test_busy_agent(self, team_mission, walker, flyer):
        check = validate_deployment(team_mission, [walker, flyer], lambda agent_id: agent_id != flyer.id)
        assert labels(check) == ["All agents available"]
        assert check.summary == "Already deployed: Flyer."

    def test_several_problems(self, short_mission, walker):
        check = validate_deployment(short_mission, [walker, walker], lambda _: False)
        assert labels(check) == [
            "At most 1 agent(s)",
            "No duplicate agents",
            "All agents available",
        ]

    def test_preview_included_even_when_infeasible(self, short_mission, walker, flyer):
        check = validate_deployment(short_mission, [walker, flyer])
        assert check.time_breakdown.total_time == 2 + 4 + 2 + 3
        assert 0.0 <= check.success_probability <= 1.0

    def test_success_uses_combined_team(self, team_mission, walker, flyer):
        solo = validate_deployment(team_mission, [flyer]).success_probability
        pair = validate_deployment(team_mission, [walker, flyer]).success_probability
        assert pair >= solo
