"""Integration tests running complete playground programs."""
import pytest
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import safedsl
from safedsl.runtime.state import RenderNode


LOGIN_FORM = '''
# Login card
swift_ui do
  card(elevation: 2) do
    vstack(spacing: 4, alignment: :leading) do
      h2("Sign in").font_weight("semibold")
      label("Email", for_input: "email")
      textfield(placeholder: "you@example.com").id("email")
      label("Password", for_input: "password")
      textfield(placeholder: "********").id("password")
      hstack(justify: :between) {
        link("Forgot password?", destination: "/reset").text_size("sm")
        button("Sign in").bg("blue-600").text_color("white").px(4).py(2).rounded
      }
    end
  end.p(6)
end
'''

DASHBOARD = '''
swift_ui do
  vstack(spacing: 6) do
    header do
      h1("Dashboard")
      nav { link("Home", destination: "/"); link("Reports", destination: "/reports") }
    end
    grid(columns: 3, spacing: 4) do
      card { text("Users"); text(1204).font_size("2xl") }
      card { text("Orders"); text(87).font_size("2xl") }
      card { text("Revenue"); text("$12k").font_size("2xl") }
    end
    divider
    list do
      list_item("First")
      list_item("Second")
    end
  end
end
'''


def find_all(node: RenderNode, tag: str):
    """Collect nodes with ``tag`` in document order."""
    found = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.tag == tag:
            found.append(current)
        stack.extend(reversed(current.children))
    return found


class TestPlaygroundPrograms:
    """Full programs through the package-level entry point."""

    def test_login_form(self):
        """Test a form layout renders with all fields."""
        result = safedsl.interpret(LOGIN_FORM)
        assert result.success, result.error
        card = result.tree.children[0]
        assert card.attributes["class"] == "rounded-lg bg-white shadow-md p-6"
        inputs = find_all(result.tree, "input")
        assert [i.attributes["id"] for i in inputs] == ["email", "password"]
        button = find_all(result.tree, "button")[0]
        assert button.attributes["class"] == "bg-blue-600 text-white px-4 py-2 rounded"
        assert find_all(result.tree, "a")[0].attributes["href"] == "/reset"

    def test_dashboard(self):
        """Test nested grids, cards and lists."""
        result = safedsl.interpret(DASHBOARD)
        assert result.success, result.error
        cards = find_all(result.tree, "div")
        grid = [d for d in cards if d.attributes.get("class", "").startswith("grid")][0]
        assert len(grid.children) == 3
        assert grid.children[0].children[1].text == "1204"
        assert [li.text for li in find_all(result.tree, "li")] == ["First", "Second"]
        assert len(find_all(result.tree, "hr")) == 1

    def test_command_style_program(self):
        """Test programs written without argument parentheses."""
        source = (
            'vstack spacing: 2 do\n'
            '  h2 "Settings"\n'
            '  text "Saved changes"\n'
            '  button "Save", disabled: true\n'
            'end\n'
        )
        result = safedsl.interpret(source)
        assert result.success, result.error
        heading, text, button = result.tree.children
        assert heading.text == "Settings"
        assert text.text == "Saved changes"
        assert button.attributes["disabled"] == "disabled"
        assert "opacity-50" in button.attributes["class"]
        assert result.digest == safedsl.interpret(
            'vstack(spacing: 2) do\n'
            '  h2("Settings")\n'
            '  text("Saved changes")\n'
            '  button("Save", disabled: true)\n'
            'end\n'
        ).digest

    def test_node_count(self):
        """Test counting nodes of a rendered tree."""
        result = safedsl.interpret('vstack { text("a"); hstack { text("b") } }')
        assert result.tree.count() == 4

    def test_repeatable(self):
        """Test running the same program twice gives equal trees."""
        first = safedsl.interpret(DASHBOARD)
        second = safedsl.interpret(DASHBOARD)
        assert first.tree == second.tree
        assert first.digest == second.digest


class TestHostileProgramsInContext:
    """Attacks embedded in otherwise valid programs."""

    @pytest.mark.parametrize("payload", [
        'text("x").send(:eval, "1")',
        'eval("File.read(\\"/etc/passwd\\")")',
        'instance_variable_get(:@secret)',
        'button("x").method(:system)',
        'text(`ls`)',
        'text("a"); system("reboot")',
    ])
    def test_rejected(self, payload):
        """Test each payload fails the whole program."""
        program = 'swift_ui do\n  vstack do\n    text("ok")\n    ' + payload + '\n  end\nend\n'
        result = safedsl.interpret(program)
        assert not result.success
        assert result.tree is None
        assert result.error.kind in ("security_error", "lex_error")

    def test_script_in_text_is_inert(self):
        """Test markup in strings stays plain text."""
        result = safedsl.interpret('text("<script>alert(1)</script>")')
        assert result.success
        assert result.tree.text == "<script>alert(1)</script>"
        assert result.tree.children == ()

    def test_javascript_link_neutralised(self):
        """Test a javascript: destination renders as '#'."""
        result = safedsl.interpret('link("x", destination: "javascript:alert(document.cookie)")')
        assert result.tree.attributes["href"] == "#"
