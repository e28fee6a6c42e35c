import sys
import textwrap

import pytest

from edge_diagram.errors import OutputMissing, RenderProcessError, RenderTimeout
from edge_diagram.renderer import MermaidCliRenderer

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="uses shebang scripts")


def fake_mmdc(tmp_path, body: str):
    """Write an executable stand-in for `mmdc` that runs `body` with argv parsed."""
    script = tmp_path / "fake-mmdc"
    script.write_text(
        f"#!{sys.executable}\n"
        "import sys, time\n"
        "args = sys.argv[1:]\n"
        "out = args[args.index('-o') + 1] if '-o' in args else None\n"
        + textwrap.dedent(body),
        encoding="utf-8",
    )
    script.chmod(0o755)
    return str(script)


@pytest.mark.asyncio
async def test_render_returns_output_bytes(tmp_path):
    command = fake_mmdc(
        tmp_path,
        """
        src = open(args[args.index('-i') + 1], encoding='utf-8').read()
        assert args[args.index('--scale') + 1] == '20'
        assert args[args.index('--backgroundColor') + 1] == 'transparent'
        open(out, 'wb').write(b'PNG:' + src.encode())
        """,
    )
    renderer = MermaidCliRenderer(command)

    data = await renderer.render("flowchart TD\n  A --> B\n")

    assert data == b"PNG:flowchart TD\n  A --> B\n"


@pytest.mark.asyncio
async def test_nonzero_exit_is_process_error(tmp_path):
    command = fake_mmdc(tmp_path, "print('Parse error on line 2'); sys.exit(1)\n")

    with pytest.raises(RenderProcessError) as excinfo:
        await MermaidCliRenderer(command).render("flowchart TD\n")

    assert excinfo.value.returncode == 1
    assert "Parse error on line 2" in excinfo.value.output


@pytest.mark.asyncio
async def test_no_output_file_is_output_missing(tmp_path):
    command = fake_mmdc(tmp_path, "print('done')\n")

    with pytest.raises(OutputMissing):
        await MermaidCliRenderer(command).render("flowchart TD\n")


@pytest.mark.asyncio
async def test_empty_output_file_is_output_missing(tmp_path):
    command = fake_mmdc(tmp_path, "open(out, 'wb').close()\n")

    with pytest.raises(OutputMissing):
        await MermaidCliRenderer(command).render("flowchart TD\n")


@pytest.mark.asyncio
async def test_slow_process_times_out(tmp_path):
    command = fake_mmdc(tmp_path, "time.sleep(10)\n")

    with pytest.raises(RenderTimeout):
        await MermaidCliRenderer(command, timeout=1.0).render("flowchart TD\n")


@pytest.mark.asyncio
async def test_missing_executable_is_process_error(tmp_path):
    renderer = MermaidCliRenderer(str(tmp_path / "does-not-exist"))

    with pytest.raises(RenderProcessError, match="Could not start"):
        await renderer.render("flowchart TD\n")


@pytest.mark.asyncio
async def test_check_available(tmp_path):
    command = fake_mmdc(tmp_path, "print('10.9.1')\n")

    assert await MermaidCliRenderer(command).check_available() == (True, "10.9.1")


@pytest.mark.asyncio
async def test_check_available_never_raises(tmp_path):
    ok, info = await MermaidCliRenderer(str(tmp_path / "nope")).check_available()
    assert not ok
    assert "Could not start" in info
