"""Pytest configuration and fixtures for test case generator tests."""

import pytest
import docx
import fitz

from testcase_generator.config import ENV_VARS, GeneratorConfig
from testcase_generator.runtime import MockLLMRuntime


TABLE_RESPONSE = """Here are the test cases for the user stories:

| Test ID | Category | Description | Test Steps | Expected Result | Test Data |
|---------|----------|-------------|------------|-----------------|-----------|
| TC-ASPTC-001 | Functional | Validate single product addition (Add a Single Product to Cart) | 1. Open the website. 2. Log in as testuser. 3. Open the "T-Shirt" page. 4. Select size "M". 5. Click "Add to Cart". | The T-Shirt is added and the cart icon shows 1 item. | Product: T-Shirt, Size: M, Quantity: 1 |
| TC-ASPTC-002 | Functional | Validate adding out-of-stock product (Add a Single Product to Cart) | 1. Open the website. 2. Log in as testuser. 3. Open the "Jacket" page. 4. Click "Add to Cart". | "Product is out of stock" is displayed. | Product: Jacket, Size: L, Quantity: 1 |
| TC-UCQ-001 | Functional | Update quantity in cart (Update Cart Quantity) | 1. Open the cart. 2. Change quantity to 3. 3. Click "Update". | Cart shows quantity 3 and the updated subtotal. | Product: T-Shirt, Quantity: 3 |

Let me know if you need more scenarios.
"""

USER_STORIES_TEXT = """Shopping Cart User Stories

User Story 1: Add a Single Product to Cart
As a shopper, I want to add a product to my cart so that I can buy it later.
Acceptance Criteria:
- The product is added with the selected size and quantity.
- Out-of-stock products cannot be added.

User Story 2: Update Cart Quantity
As a shopper, I want to change the quantity of an item in my cart.
Acceptance Criteria:
- The subtotal is recalculated.
"""


@pytest.fixture
def table_response():
    return TABLE_RESPONSE


@pytest.fixture
def mock_runtime():
    """Mock runtime that answers every user story prompt with a valid table."""
    return MockLLMRuntime({"user stories": TABLE_RESPONSE}, default=TABLE_RESPONSE)


@pytest.fixture
def prose_runtime():
    """Mock runtime that never returns a table."""
    return MockLLMRuntime({}, default="I could not find any requirements to test.")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate configuration from the developer's environment and config files."""
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(
        "testcase_generator.config.user_config_path",
        lambda: tmp_path / "no-such-dir" / "config.toml"
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def project_folder(tmp_path):
    folder = tmp_path / "project"
    folder.mkdir()
    return folder


@pytest.fixture
def sample_config(project_folder):
    return GeneratorConfig(api_key="sk-test", project_folder=project_folder)


@pytest.fixture
def user_stories_docx(tmp_path):
    """DOCX with user story paragraphs and a small table."""
    path = tmp_path / "user_stories.docx"
    document = docx.Document()
    for line in USER_STORIES_TEXT.splitlines():
        document.add_paragraph(line)
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Field"
    table.cell(0, 1).text = "Limit"
    table.cell(1, 0).text = "Quantity"
    table.cell(1, 1).text = "1-10"
    document.save(str(path))
    return path


@pytest.fixture
def requirements_txt(tmp_path):
    path = tmp_path / "requirements.txt"
    path.write_text(USER_STORIES_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def requirements_pdf(tmp_path):
    path = tmp_path / "requirements.pdf"
    pdf = fitz.open()
    page = pdf.new_page()
    page.insert_text((72, 72), "User Story 1: Add a Single Product to Cart")
    page.insert_text((72, 100), "The product is added with the selected quantity.")
    pdf.save(str(path))
    pdf.close()
    return path
