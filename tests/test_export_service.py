import pytest

from subsource_validator.errors import InputValidationError
from subsource_validator.models import AnalysisResult
from subsource_validator.services.export_service import BOM, export_analysis_csv, group_label

from conftest import analysis_response, spec_item


def _export(payload):
    return export_analysis_csv(AnalysisResult.model_validate(payload))


def test_report_starts_with_byte_order_mark():
    assert _export(analysis_response()).startswith(BOM)


def test_group_header_lines_and_table_header():
    lines = _export(analysis_response())[len(BOM):].split("\n")

    assert lines[0] == '"GROUP A: M1 vs Substitutes"'
    assert lines[1] == '"Summary: M1-SUB matches every critical rating."'
    assert lines[2] == '"Recommendation: B"'
    assert lines[3] == "ID,Parameter,Unit,Spec A (M1),Spec A-1 (M1-SUB),A-1 Result,Spec A-2 (Part C),A-2 Result,Comment"


def test_spec_rows_quote_everything_but_the_id():
    lines = _export(analysis_response(specs=[spec_item(7)]))[len(BOM):].split("\n")

    assert lines[4] == (
        '7,"Parameter 7","V","100","100","Fully Compliant",'
        '"N/A (Missing File)","Non-Compliant","Same rating."'
    )


def test_embedded_quotes_are_doubled():
    payload = analysis_response(specs=[spec_item(1, comment='Matches "AEC-Q101" grade')])

    assert '"Matches ""AEC-Q101"" grade"' in _export(payload)


def test_each_group_ends_with_two_blank_lines():
    payload = analysis_response()
    second = dict(payload["groups"][0], id="group-2", rowNumber=2)
    second["mappedParts"] = {"partA": "M2", "partB": "", "partC": ""}
    payload["groups"].append(second)

    lines = _export(payload)[len(BOM):].split("\n")

    assert lines[6:8] == ["", ""]
    assert lines[8] == '"GROUP B: M2 vs Substitutes"'
    assert lines[-2:] == ["", ""]


def test_group_labels_follow_position():
    assert [group_label(i) for i in range(3)] == ["A", "B", "C"]


@pytest.mark.parametrize("result", [None, AnalysisResult(groups=[], missing_files=[])])
def test_nothing_to_export(result):
    with pytest.raises(InputValidationError) as excinfo:
        export_analysis_csv(result)

    assert str(excinfo.value) == "No data to export"
