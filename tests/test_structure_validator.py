from wingplan.schemas.structure import CommercialUnitPlacement, Unit, ValidationIssue
from wingplan.services.structure_validator import format_issue_messages, validate

from tests.factories import make_floor, make_project, make_wing


def _span_issues(issues):
    return [i for i in issues if "total unit span" in i.message]


class TestValidateWing:
    def test_complete_wing_has_no_issues(self, validator):
        wing = make_wing([[1, 1, 1, 1, 1, 1], [1, 1, 2, 1, 1]])

        assert validator.validate_wing(wing) == []

    def test_floor_one_span_short(self, validator):
        wing = make_wing([[1, 1, 1, 1, 1, 1], [1, 1, 1, 1, 1]])

        issues = validator.validate_wing(wing)

        assert len(issues) == 1
        assert issues[0].path == ["floors", 1, "units"]
        assert "6" in issues[0].message
        assert "5" in issues[0].message
        assert issues[0].message == (
            'In wing "Wing A" floor 2 has a total unit span of 5, but units per floor is 6. '
            "The total unit span must be exactly 6, not more and not less."
        )

    def test_span_must_match_exactly(self, validator):
        under = validator.validate_wing(make_wing([[1, 1, 1, 1, 1]]))
        over = validator.validate_wing(make_wing([[1, 1, 1, 1, 1, 2]]))

        assert len(_span_issues(under)) == 1
        assert len(_span_issues(over)) == 1

    def test_empty_floor_reports_missing_units_and_span(self, validator):
        wing = make_wing([[]])

        issues = validator.validate_wing(wing)

        assert [i.path for i in issues] == [["floors", 0, "units"], ["floors", 0, "units"]]
        assert issues[0].message == 'In wing "Wing A" floor 1 needs at least 1 unit.'
        assert "total unit span of 0" in issues[1].message

    def test_wing_without_floors(self, validator):
        issues = validator.validate_wing(make_wing([]))

        assert [i.path for i in issues] == [["floors"]]

    def test_wing_fields(self, validator):
        wing = make_wing([[1]], units_per_floor=0, name=" ")

        paths = [i.path for i in validator.validate_wing(wing)]

        assert ["name"] in paths
        assert ["unitsPerFloor"] in paths

    def test_header_floor_bounds(self, validator):
        negative = make_wing([[1, 1, 1, 1, 1, 1]], header_floor_index=-1)
        beyond = make_wing([[1, 1, 1, 1, 1, 1]], header_floor_index=1)

        assert [i.path for i in validator.validate_wing(negative)] == [["headerFloorIndex"]]
        assert [i.path for i in validator.validate_wing(beyond)] == [["headerFloorIndex"]]

    def test_unit_fields(self, validator):
        floor = make_floor(1, [1, 1, 1, 1, 1, 1])
        blank = Unit(unit_number="", area=0, configuration="", unit_span=1)
        floor = floor.merged({"units": (blank, *floor.units[1:])})
        wing = make_wing([]).merged({"floors": (floor,)})

        paths = [i.path for i in validator.validate_wing(wing)]

        assert paths == [
            ["floors", 0, "units", 0, "unitNumber"],
            ["floors", 0, "units", 0, "area"],
            ["floors", 0, "units", 0, "configuration"],
        ]

    def test_commercial_floor_span_checked_only_at_wing_level(self, validator):
        wing = make_wing([[1, 1, 1, 1, 1, 1]], commercial_floor_spans=[[1, 1]])

        assert validator.validate_wing(wing) == []

        issues = validator.validate_wing(wing, wing_level_commercial=True)
        assert [i.path for i in issues] == [["commercialFloors", 0, "units"]]
        assert "commercial floor 1" in issues[0].message

    def test_commercial_floors_need_units_at_any_placement(self, validator):
        wing = make_wing([[1, 1, 1, 1, 1, 1]], commercial_floor_spans=[[]])

        issues = validator.validate_wing(wing)

        assert [i.path for i in issues] == [["commercialFloors", 0, "units"]]
        assert issues[0].message == 'In wing "Wing A" commercial floor 1 needs at least 1 unit.'

    def test_invalid_capacity_skips_span_check(self, validator):
        wing = make_wing([[1, 1], [1]], units_per_floor=0)

        issues = validator.validate_wing(wing)

        assert [i.path for i in issues] == [["unitsPerFloor"]]

    def test_area_below_one_is_rejected(self, validator):
        floor = make_floor(1, [6])
        floor = floor.merged({"units": (floor.units[0].merged({"area": 0.5}),)})
        wing = make_wing([]).merged({"floors": (floor,)})

        issues = validator.validate_wing(wing)

        assert [i.path for i in issues] == [["floors", 0, "units", 0, "area"]]

    def test_does_not_mutate(self, validator):
        wing = make_wing([[1, 1, 1]])
        before = wing.model_dump()

        validator.validate_wing(wing)

        assert wing.model_dump() == before


class TestValidateProject:
    def test_valid_project(self, validator):
        project = make_project([make_wing([[1, 1, 1, 1, 1, 1]])])

        assert validator.validate(project) == []

    def test_is_idempotent(self, validator):
        project = make_project([make_wing([[1, 1, 1], []])], name="")

        first = validator.validate(project)
        second = validator.validate(project)

        assert first == second
        assert first

    def test_required_fields(self, validator):
        project = make_project(
            [make_wing([[1, 1, 1, 1, 1, 1]])],
            name="",
            by="  ",
            location="",
            start_date=None,
            email="not-an-email",
        )

        paths = [i.path for i in validator.validate(project)]

        assert paths == [["name"], ["by"], ["location"], ["startDate"], ["email"]]

    def test_at_least_one_wing(self, validator):
        issues = validator.validate(make_project([]))

        assert issues == [
            ValidationIssue(path=["wings"], message="At least 1 wing is required in a project.")
        ]

    def test_wing_paths_are_prefixed(self, validator):
        project = make_project([
            make_wing([[1, 1, 1, 1, 1, 1]]),
            make_wing([[1, 1, 1, 1, 1]], name="Wing B"),
        ])

        issues = validator.validate(project)

        assert [i.path for i in issues] == [["wings", 1, "floors", 0, "units"]]

    def test_wing_level_commercial_floors(self, validator):
        project = make_project(
            [make_wing([[1, 1, 1, 1, 1, 1]], commercial_floor_spans=[[1, 1, 1]])],
            placement=CommercialUnitPlacement.WING_LEVEL,
        )

        issues = validator.validate(project)

        assert [i.path for i in issues] == [["wings", 0, "commercialFloors", 0, "units"]]

    def test_project_level_commercial_floors(self, validator):
        project = make_project(
            [make_wing([[1, 1, 1, 1, 1, 1]], commercial_floor_spans=[[1]])],
            commercial_floors=[make_floor(1, [])],
        )

        issues = validator.validate(project)

        # No span target for project floors or, at project level, wing commercial floors
        assert [i.path for i in issues] == [["commercialFloors", 0, "units"]]
        assert issues[0].message == "Project commercial floor 1 needs at least 1 unit."

    def test_module_level_validate(self):
        assert validate(make_project([make_wing([[6]])])) == []


class TestPrepareSubmission:
    def test_rejected_with_message(self, validator):
        submission = validator.prepare_submission(make_project([]))

        assert not submission.accepted
        assert submission.payload is None
        assert submission.message == "• At least 1 wing is required in a project."

    def test_project_level_strips_wing_commercial_floors(self, validator):
        project = make_project(
            [make_wing([[1, 1, 1, 1, 1, 1]], commercial_floor_spans=[[1]])],
            commercial_floors=[make_floor(1, [1, 1])],
        )

        submission = validator.prepare_submission(project)

        assert submission.accepted
        assert "commercialFloors" not in submission.payload["wings"][0]
        assert len(submission.payload["commercialFloors"]) == 1
        assert project.wings[0].commercial_floors is not None

    def test_wing_level_strips_project_commercial_floors(self, validator):
        project = make_project(
            [make_wing([[1, 1, 1, 1, 1, 1]], commercial_floor_spans=[[3, 3]])],
            placement=CommercialUnitPlacement.WING_LEVEL,
            commercial_floors=[make_floor(1, [1])],
        )

        submission = validator.prepare_submission(project)

        assert submission.accepted
        assert "commercialFloors" not in submission.payload
        assert len(submission.payload["wings"][0]["commercialFloors"]) == 1

    def test_payload_uses_wire_names(self, validator):
        payload = validator.prepare_submission(make_project([make_wing([[6]])])).payload

        assert payload["startDate"] == "2026-01-01"
        assert payload["commercialUnitPlacement"] == "projectLevel"
        assert payload["wings"][0]["unitsPerFloor"] == 6
        assert payload["wings"][0]["floors"][0]["units"][0]["unitSpan"] == 6


class TestFormatIssueMessages:
    def test_truncates_after_limit(self):
        issues = [ValidationIssue(path=[], message=f"problem {n}") for n in range(6)]

        text = format_issue_messages(issues, max_to_show=4)

        assert text.splitlines()[:4] == ["• problem 0", "• problem 1", "• problem 2", "• problem 3"]
        assert text.endswith("... +2 more warnings")

    def test_single_remaining_warning(self):
        issues = [ValidationIssue(path=[], message="a"), ValidationIssue(path=[], message="b")]

        assert format_issue_messages(issues, max_to_show=1) == "• a\n\n... +1 more warning"
