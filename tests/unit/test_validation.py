"""Unit tests for project payload validation."""

import pytest

from tailui.errors import ErrorCategory, ValidationError
from tailui.project.validation import ProjectValidator, ValidationIssue, ValidationResult


@pytest.fixture
def validator() -> ProjectValidator:
    return ProjectValidator()


class TestProjectValidator:
    """Test schema-backed validation."""

    def test_valid_project(self, validator, sample_project):
        result = validator.validate(sample_project)
        assert result.valid
        assert result.errors == []
        assert str(result) == "Project is valid."

    def test_elements_not_a_list(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.check({"elements": "x", "columns": 6})
        assert exc_info.value.field == "elements"
        assert exc_info.value.category == ErrorCategory.VALIDATION
        assert exc_info.value.exit_code == 2

    @pytest.mark.parametrize("raw", [None, [], "project", 42])
    def test_non_object_payload(self, validator, raw):
        with pytest.raises(ValidationError) as exc_info:
            validator.check(raw)
        assert exc_info.value.field == "root"

    @pytest.mark.parametrize("columns", [0, 13, "6", None, True, 12.5])
    def test_columns_out_of_range(self, validator, columns):
        with pytest.raises(ValidationError) as exc_info:
            validator.check({"elements": [], "columns": columns})
        assert exc_info.value.field == "columns"

    @pytest.mark.parametrize("columns", [1, 12, 6.5])
    def test_columns_in_range(self, validator, columns):
        assert validator.validate({"elements": [], "columns": columns}).valid

    def test_missing_columns(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.check({"elements": []})
        assert exc_info.value.field == "columns"

    def test_element_missing_id(self, validator):
        project = {
            "elements": [{"id": "a", "type": "div", "x": 0, "y": 0}, {"type": "div", "x": 0, "y": 0}],
            "columns": 12,
        }
        with pytest.raises(ValidationError) as exc_info:
            validator.check(project)
        assert exc_info.value.field == "elements.1.id"

    def test_element_empty_type(self, validator):
        project = {"elements": [{"id": "a", "type": "", "x": 0, "y": 0}], "columns": 12}
        with pytest.raises(ValidationError) as exc_info:
            validator.check(project)
        assert exc_info.value.field == "elements.0.type"

    @pytest.mark.parametrize("x", ["10", None, False])
    def test_non_numeric_coordinates(self, validator, x):
        project = {"elements": [{"id": "a", "type": "div", "x": x, "y": 0}], "columns": 12}
        with pytest.raises(ValidationError) as exc_info:
            validator.check(project)
        assert exc_info.value.field == "elements.0.x"

    @pytest.mark.parametrize(
        "key,value",
        [
            ("borderRadius", "7"),
            ("fontWeight", [700]),
            ("borderWidth", {"px": 2}),
            ("width", True),
            ("display", ["flex"]),
            ("textContent", 12),
        ],
    )
    def test_mistyped_style_field(self, validator, key, value):
        project = {
            "elements": [{"id": "a", "type": "div", "x": 0, "y": 0, key: value}],
            "columns": 12,
        }
        result = validator.validate(project)
        assert not result.valid
        assert result.errors[0].path == f"elements.0.{key}"
        assert key in result.errors[0].message

    def test_mistyped_animation(self, validator):
        project = {
            "elements": [
                {"id": "a", "type": "div", "x": 0, "y": 0, "animation": {"duration": "1s"}}
            ],
            "columns": 12,
        }
        with pytest.raises(ValidationError) as exc_info:
            validator.check(project)
        assert exc_info.value.field == "elements.0.animation"

    def test_nullable_fields_and_unknown_keys_pass(self, validator):
        element = {
            "id": 7,
            "type": "div",
            "x": 0,
            "y": 0,
            "paddingTop": None,
            "opacity": None,
            "customFlag": ["anything"],
        }
        assert validator.validate({"elements": [element], "columns": 12}).valid

    def test_errors_ordered_by_path(self, validator):
        project = {
            "elements": [{"id": "a", "type": "div", "x": 0, "y": 0}] * 2
            + [{"id": f"e{i}", "type": "div", "x": "bad", "y": 0} for i in range(2, 12)],
            "columns": 99,
        }
        result = validator.validate(project)
        paths = [issue.path for issue in result.errors]
        assert paths[0] == "columns"
        assert paths[1:] == [f"elements.{i}.x" for i in range(2, 12)]

    def test_duplicate_ids_are_errors(self, validator):
        project = {
            "elements": [
                {"id": "a", "type": "div", "x": 0, "y": 0},
                {"id": "a", "type": "div", "x": 0, "y": 0},
            ],
            "columns": 12,
        }
        result = validator.validate(project)
        assert not result.valid
        assert result.errors[0].path == "elements.1.id"

    def test_unknown_kind_is_a_warning(self, validator):
        project = {"elements": [{"id": "a", "type": "widget", "x": 0, "y": 0}], "columns": 12}
        result = validator.validate(project)
        assert result.valid
        assert [w.path for w in result.warnings] == ["elements.0.type"]
        assert "Warnings (1):" in str(result)


class TestValidationResult:
    def test_to_dict(self):
        result = ValidationResult(
            valid=False,
            errors=[ValidationIssue(path="columns", message="bad", suggestion="fix it")],
        )
        assert result.to_dict() == {
            "valid": False,
            "errors": [
                {"path": "columns", "message": "bad", "suggestion": "fix it", "severity": "error"}
            ],
            "warnings": [],
        }

    def test_str_lists_issues(self):
        result = ValidationResult(valid=False, errors=[ValidationIssue("elements", "Expected array")])
        assert "Errors (1):" in str(result)
        assert "[elements] Expected array" in str(result)
