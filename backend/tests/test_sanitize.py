import pytest
from pydantic import ValidationError

from docportal.schemas.document import DocumentCreate, DocumentUpdate
from docportal.utils.sanitize import sanitize_rich_content, sanitize_text


def test_sanitize_text_escapes_html_and_trims():
    assert sanitize_text('  <b>"Tom" & \'Jerry\'</b>  ') == "&lt;b&gt;&quot;Tom&quot; &amp; &#39;Jerry&#39;&lt;/b&gt;"
    assert sanitize_text("") == ""
    assert sanitize_text(None) == ""


def test_sanitize_rich_content_drops_script_blocks():
    raw = "Olá<SCRIPT type='text/javascript'>alert(1)</script> mundo"
    assert sanitize_rich_content(raw) == "Olá mundo"


def test_document_create_sanitizes_fields():
    doc = DocumentCreate(title="  Relatório <Q1>  ", content="texto")
    assert doc.title == "Relatório &lt;Q1&gt;"
    assert doc.category_id is None


@pytest.mark.parametrize("title,message", [
    ("ab", "Título muito curto"),
    ("   ab   ", "Título muito curto"),
    ("x" * 201, "Título muito longo"),
])
def test_document_title_length(title, message):
    with pytest.raises(ValidationError) as exc_info:
        DocumentCreate(title=title, content="ok")
    assert message in str(exc_info.value)


def test_document_content_required():
    with pytest.raises(ValidationError) as exc_info:
        DocumentCreate(title="Título válido", content="   ")
    assert "Conteúdo obrigatório" in str(exc_info.value)

    with pytest.raises(ValidationError):
        DocumentCreate(title="Título válido", content="<script>alert(1)</script>")


def test_document_payload_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        DocumentCreate(title="Título válido", content="ok", status="Aprovado")
    with pytest.raises(ValidationError):
        DocumentUpdate(status="Aprovado")


def test_document_category_must_be_uuid():
    with pytest.raises(ValidationError):
        DocumentCreate(title="Título válido", content="ok", category_id="not-a-uuid")
