"""
Test Configuration and Fixtures
================================

Shared pytest fixtures for product-entry tests.

Documents are built in memory (openpyxl, zipfile, pymupdf) and the LLM
is replaced by a scripted fake provider, so no test touches the network.
"""

import io
import json
import zipfile
from typing import Any

import pytest

from src.config.pipeline import PipelineConfig, ProviderConfig


class FakeProvider:
    """
    Scripted CompletionProvider.

    Each call consumes the next scripted item; an Exception item is raised
    instead of returned. The last item repeats once the script runs out.
    """

    def __init__(self, responses: list[Any], name: str = "fake", model: str = "fake-model") -> None:
        self.responses = list(responses)
        self.name = name
        self.model = model
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "temperature": temperature,
                "max_output_tokens": max_output_tokens,
            }
        )
        index = min(len(self.calls), len(self.responses)) - 1
        item = self.responses[index]
        if isinstance(item, Exception):
            raise item
        return item


def products_response(*products: dict[str, Any], notes: str = "") -> str:
    """Serialize products as an LLM completion."""
    payload: dict[str, Any] = {"products": list(products)}
    if notes:
        payload["summary"] = {"processingNotes": notes}
    return json.dumps(payload)


@pytest.fixture
def fake_provider_factory():
    """Build FakeProvider instances from a response script."""
    return FakeProvider


@pytest.fixture
def llm_response():
    """Build a JSON completion from product dicts."""
    return products_response


@pytest.fixture
def bottle_product() -> dict[str, Any]:
    """Create a fully specified product as the LLM would return it."""
    return {
        "name": "Bottle A",
        "category": "Bottle",
        "description": "250ml HDPE bottle with screw neck",
        "specifications": {
            "material": "HDPE",
            "capacity": {"value": 250, "unit": "ml"},
            "color": "White",
            "minimumOrderQuantity": 5000,
        },
        "pricing": {"basePrice": "$0.45", "currency": "usd"},
        "images": ["https://example.com/bottle-a.png"],
    }


@pytest.fixture
def provider_config() -> ProviderConfig:
    """Create a provider configuration without network retries delays."""
    return ProviderConfig(
        name="openai",
        model="gpt-4",
        base_url="https://llm.test/v1",
        api_key="test-key",
        token_budget=7000,
        max_retries=3,
        retry_delay=0.0,
    )


@pytest.fixture
def pipeline_config() -> PipelineConfig:
    """Create a default pipeline configuration."""
    return PipelineConfig()


@pytest.fixture
def xlsx_bytes() -> bytes:
    """Create a workbook with a header, a duplicate row and a blank row."""
    import openpyxl

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Products"
    ws.append(["Name", "Material", "Capacity"])
    ws.append(["Bottle A", "HDPE", "250ml"])
    ws.append([None, None, None])
    ws.append(["Bottle A", "HDPE", "250ml"])
    ws.append(["Jar B", "Glass", 100])

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def duplicate_rows_xlsx() -> bytes:
    """Create a workbook holding the same product row twice."""
    import openpyxl

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.append(["Bottle A", "HDPE", "250ml"])
    ws.append(["Bottle A", "HDPE", "250ml"])

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def build_pptx(parts: dict[str, str]) -> bytes:
    """Zip XML parts into a minimal slide deck archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("[Content_Types].xml", "<Types/>")
        for name, xml in parts.items():
            archive.writestr(name, xml)
    return buffer.getvalue()


@pytest.fixture
def pptx_bytes() -> bytes:
    """Create a two-slide deck with speaker notes on the first slide."""
    ns = 'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main"'
    return build_pptx(
        {
            "ppt/slides/slide1.xml": (
                f"<p:sld {ns}><a:p><a:r><a:t>Bottle A</a:t></a:r>"
                '<a:r><a:t xml:space="preserve">HDPE &amp; PP 250ml</a:t></a:r>'
                "<a:tab/></a:p></p:sld>"
            ),
            "ppt/notesSlides/notesSlide1.xml": (
                f"<p:notes {ns}><a:t>MOQ 5000 units</a:t></p:notes>"
            ),
            "ppt/slides/slide2.xml": (
                f"<p:sld {ns}><a:t>Jar B</a:t><a:t>   </a:t></p:sld>"
            ),
        }
    )


@pytest.fixture
def empty_pptx_bytes() -> bytes:
    """Create a deck whose slides hold no text runs."""
    return build_pptx({"ppt/slides/slide1.xml": "<p:sld><p:pic/></p:sld>"})


@pytest.fixture
def pdf_bytes() -> bytes:
    """Create a one-page PDF with a text layer."""
    import pymupdf

    doc = pymupdf.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Bottle A HDPE 250ml price 0.45 USD")
    page.insert_text((72, 100), "Jar B Glass 100ml")
    data = doc.tobytes()
    doc.close()
    return data
