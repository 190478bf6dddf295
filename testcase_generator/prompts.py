"""
Prompt construction for test case generation.

Two prompt styles are supported:
- basic: short prompt asking for the six fields in a plain text table
- user stories: exhaustive prompt with per-story Test ID prefixes and a
  strict 6-column pipe table format the table parser can read
"""

from __future__ import annotations
import re
from typing import List

from .models import UserStoryTitle

USER_STORY_PATTERN = re.compile(r'^User Story \d+: .+')
USER_STORY_PREFIX = re.compile(r'^User Story \d+: ')
MAX_PREFIX_LENGTH = 5

BASIC_SYSTEM_PROMPT = "You are a QA expert specializing in creating functional test cases."
USER_STORY_SYSTEM_PROMPT = (
    "You are a QA expert specializing in creating comprehensive functional test cases."
)


def extract_user_story_titles(user_stories_text: str) -> List[UserStoryTitle]:
    """
    Find ``User Story <n>: <title>`` lines and derive a Test ID prefix from
    each title (initials, max 5), e.g. "Add a Single Product to Cart" -> "AASPT".

    Returns a single Default/DEF entry when no story title is found.
    """
    titles = []
    for line in user_stories_text.split("\n"):
        line = line.strip()
        if not USER_STORY_PATTERN.match(line):
            continue
        full_title = USER_STORY_PREFIX.sub('', line).strip()
        prefix = "".join(word[:1].upper() for word in full_title.split(' '))[:MAX_PREFIX_LENGTH]
        titles.append(UserStoryTitle(full_title=full_title, prefix=prefix))

    return titles or [UserStoryTitle(full_title="Default", prefix="DEF")]


def build_basic_prompt(document_content: str) -> str:
    return f"""
You are a QA expert. Based on the following requirements document, generate detailed functional test cases in a structured format. Each test case should include:
- Test ID: Unique identifier (e.g., TC001)
- Category: Functional
- Description: Brief overview of the test case
- Test Steps: Step-by-step instructions
- Expected Result: Expected outcome
- Test Data: Specific inputs to be used

Requirements Document:
{document_content}

Provide test cases in a clear, tabular plain text format.
"""


def build_title_map(titles: List[UserStoryTitle]) -> str:
    return "\n".join(
        f'Title: "{title.full_title}", Prefix: TC-{title.prefix}-<number>' for title in titles
    )


def build_user_story_prompt(
    user_stories_text: str,
    titles: List[UserStoryTitle],
    feature: str = "Add to Cart",
) -> str:
    """Build the exhaustive user story prompt for ``feature``."""

    title_map = build_title_map(titles)
    example_prefix = titles[0].prefix if titles else "DEF"

    return f"""
You are a QA expert tasked with generating exhaustive functional test cases for the "{feature}" feature based on the provided user stories. For **each acceptance criterion** in every user story, generate **at least 3–5 test cases** to cover all scenarios, including:
- Positive cases (happy path, e.g., adding a valid product).
- Negative cases (e.g., out-of-stock products, invalid quantities).
- Edge cases (e.g., maximum/minimum quantities, special characters in inputs).
- Boundary cases (e.g., cart size limits, session timeouts).
- Accessibility scenarios (e.g., adding to cart using keyboard navigation).
- Database scenarios
- Security test scenarios.

Each test case must include:
- Test ID: Unique identifier in the format TC-<prefix>-<number>, where <prefix> is derived from the user story title (see below) and <number> is a sequential number (e.g., TC-{example_prefix}-001).
- Category: Functional
- Description: Brief overview of the test case, referencing the specific acceptance criterion and user story.
- Test Steps: Detailed, numbered step-by-step instructions (6–8 steps per test case, unless the scenario is inherently simple). Steps must include:
  - Preconditions (e.g., user logged in, product available in stock).
  - Specific user actions (e.g., clicking buttons, selecting product variants like size or color).
  - System verifications (e.g., checking for UI updates, error messages, or cart icon changes).
  - Example: Instead of "Navigate to product page," use "From the homepage, click the 'Clothing' category in the top navigation bar, then select the 'T-Shirt' product."
- Expected Result: Expected outcome, tied to the acceptance criterion.
- Test Data: Specific inputs (e.g., Product: T-Shirt, Size: M, Quantity: 1, Username: testuser).

User Story Titles and Test ID Prefixes:
{title_map}

User Stories:
{user_stories_text}

Provide test cases in a plain text table format using pipes (|) to separate columns, with exactly 6 columns per row, no extra pipes, and no missing columns. If a value must contain a literal pipe character, escape it as \\|. Example:
| Test ID | Category | Description | Test Steps | Expected Result | Test Data |
|---------|----------|-------------|------------|-----------------|-----------|
| TC-ASPTC-001 | Functional | Validate single product addition (Add a Single Product to Cart) | 1. Open the e-commerce website in a browser. 2. Log in with a valid user account (username: testuser, password: password123). 3. Navigate to the "Clothing" category via the top navigation bar. 4. Click on the product "T-Shirt" to open its details page. 5. Verify the "Add to Cart" button is visible and enabled. 6. Select size "M" from the dropdown. 7. Enter "1" in the quantity field. 8. Click the "Add to Cart" button. | The T-Shirt is added to the cart, a success message "Item added to cart" is displayed, and the cart icon updates to show 1 item. | Product: T-Shirt, Size: M, Quantity: 1, Username: testuser, Password: password123 |
| TC-ASPTC-002 | Functional | Validate adding out-of-stock product (Add a Single Product to Cart) | 1. Open the e-commerce website in a browser. 2. Log in with a valid user account (username: testuser, password: password123). 3. Navigate to the "Clothing" category via the top navigation bar. 4. Select an out-of-stock product (e.g., Jacket). 5. Verify the "Add to Cart" button is disabled or shows an out-of-stock message. 6. Attempt to click the "Add to Cart" button. 7. Verify no item is added to the cart. | An error message "Product is out of stock" is displayed, and the cart remains unchanged. | Product: Jacket, Size: L, Quantity: 1, Username: testuser, Password: password123 |

Rules:
- Generate **at least 3–5 test cases per acceptance criterion** to ensure comprehensive coverage.
- Use the correct Test ID prefix for each user story (e.g., TC-{example_prefix}- for "{titles[0].full_title if titles else 'Default'}").
- Ensure Test IDs are unique and sequential within each prefix (e.g., TC-{example_prefix}-001, TC-{example_prefix}-002).
- Test steps must be detailed, actionable, and include specific user actions and system checks. Avoid vague steps.
- Cover all possible scenarios implied by the acceptance criteria, including edge cases and accessibility.
- Keep the table well-formatted with exactly 6 columns, no missing or extra columns.
"""
