"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Shared WireScript source fixtures
- Isolation from WIRESCRIPT_* variables set in the developer's shell
"""

from __future__ import annotations

import pytest
from dotenv import load_dotenv

from wirescript.config import EnvVar

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Sample Sources
# =============================================================================

DASHBOARD_SOURCE = """\
; Sample application
(wire
  (meta :title "Admin" :version 2)

  (define stat-card (label value)
    (card :col :padding 16
      (text $label :low)
      (text $value :high)))

  (layout shell
    (box :col
      (header
        (text "Admin" :high))
      (slot)))

  ; Landing page
  (screen dashboard "Dashboard" :layout shell
    (box :col :gap 16
      (stat-card "Users" :value "1,024")
      (list
        (repeat :count 3 :as "row"
          (text $row)))
      (button "Settings" :to settings :primary)
      (button "Delete" :to #confirm :danger))
    (modal :id confirm :title "Confirm"
      (text "Are you sure?")
      (button "Cancel" :to :close)))

  (screen settings "Settings"
    (form
      (input "Name" :placeholder "Your name")
      (button "Back" :to :back))))
"""


@pytest.fixture
def dashboard_source() -> str:
    """Multi-screen document exercising most forms."""
    return DASHBOARD_SOURCE


# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _clear_wirescript_env(monkeypatch):
    """Run every test against built-in defaults, not the local .env."""
    for var in EnvVar:
        monkeypatch.delenv(var.value.name, raising=False)
