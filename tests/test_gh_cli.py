"""Tests for the gh CLI gateway (mocked subprocess)."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from conftest import load_fixture
from git_overlap.errors import ConfigurationError, MalformedResponseError, TransportError
from git_overlap.gh_cli import GH_FILES_CAP, GhCliGateway
from git_overlap.models import PRSummary

EXEC = "git_overlap.gh_cli.asyncio.create_subprocess_exec"


def _mock_process(stdout: bytes, stderr: bytes = b"", returncode: int = 0):
    process = AsyncMock()
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    process.returncode = returncode
    return process


class TestListOpenPullRequests:
    @pytest.mark.asyncio
    async def test_parses_prs_in_order(self):
        output = json.dumps(load_fixture("gh_pr_list.json")).encode()

        with patch(EXEC, return_value=_mock_process(output)) as mock_exec:
            async with GhCliGateway(gh_command="gh") as gateway:
                prs = await gateway.list_open_pull_requests("owner/repo", 5)

        assert prs == [
            PRSummary(number=2, branch="feat/improve_sparkling_water_with_ai"),
            PRSummary(number=1, branch="feat/nanowarofsteel/zen_of_python"),
        ]
        args = mock_exec.call_args.args
        assert args[:3] == ("gh", "pr", "list")
        assert "--repo" in args and args[args.index("--repo") + 1] == "owner/repo"
        assert args[args.index("--limit") + 1] == "5"
        assert args[args.index("--json") + 1] == "number,headRefName,files"
        assert args[args.index("--search") + 1] == "is:open is:unmerged"

    @pytest.mark.asyncio
    async def test_truncates_to_limit(self):
        entries = [{"number": n, "headRefName": f"b{n}", "files": []} for n in range(1, 6)]

        with patch(EXEC, return_value=_mock_process(json.dumps(entries).encode())):
            async with GhCliGateway() as gateway:
                prs = await gateway.list_open_pull_requests("owner/repo", 2)

        assert [p.number for p in prs] == [1, 2]

    @pytest.mark.asyncio
    async def test_nonzero_exit(self):
        process = _mock_process(b"", b"To get started with GitHub CLI, please run: gh auth login", returncode=4)

        with patch(EXEC, return_value=process):
            async with GhCliGateway() as gateway:
                with pytest.raises(TransportError, match="gh auth login"):
                    await gateway.list_open_pull_requests("owner/repo", 5)

    @pytest.mark.asyncio
    async def test_gh_not_installed(self):
        with patch(EXEC, side_effect=FileNotFoundError("gh")):
            async with GhCliGateway(gh_command="nonexistent") as gateway:
                with pytest.raises(ConfigurationError, match="not found"):
                    await gateway.list_open_pull_requests("owner/repo", 5)

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        with patch(EXEC, return_value=_mock_process(b"not json")):
            async with GhCliGateway() as gateway:
                with pytest.raises(MalformedResponseError, match="JSON"):
                    await gateway.list_open_pull_requests("owner/repo", 5)

    @pytest.mark.asyncio
    async def test_missing_fields(self):
        output = json.dumps([{"number": 1}]).encode()
        with patch(EXEC, return_value=_mock_process(output)):
            async with GhCliGateway() as gateway:
                with pytest.raises(MalformedResponseError):
                    await gateway.list_open_pull_requests("owner/repo", 5)


class TestGetChangedFiles:
    @pytest.mark.asyncio
    async def test_uses_batched_files(self):
        output = json.dumps(load_fixture("gh_pr_list.json")).encode()

        with patch(EXEC, return_value=_mock_process(output)) as mock_exec:
            async with GhCliGateway() as gateway:
                prs = await gateway.list_open_pull_requests("owner/repo", 5)
                files = [await gateway.get_changed_files("owner/repo", pr) for pr in prs]

        assert files == [{"README.md", "sparkling_water/ai_engine/ai.py"}, {"README.md"}]
        assert mock_exec.call_count == 1

    @pytest.mark.asyncio
    async def test_uncached_pr_pages_through_api(self):
        with patch(EXEC, return_value=_mock_process(b"docs/index.md\nsrc/app.py\n")) as mock_exec:
            async with GhCliGateway(gh_command="gh") as gateway:
                files = await gateway.get_changed_files("owner/repo", PRSummary(number=9, branch="b"))

        assert files == {"docs/index.md", "src/app.py"}
        args = mock_exec.call_args.args
        assert args[:3] == ("gh", "api", "repos/owner/repo/pulls/9/files")
        assert "--paginate" in args

    @pytest.mark.asyncio
    async def test_capped_file_list_is_refetched(self):
        capped = [{"path": f"file_{i}.py"} for i in range(1, GH_FILES_CAP + 1)]
        listing = json.dumps([{"number": 4, "headRefName": "big", "files": capped}]).encode()
        full = "\n".join(f"file_{i}.py" for i in range(1, GH_FILES_CAP + 2)).encode()

        with patch(EXEC, side_effect=[_mock_process(listing), _mock_process(full)]) as mock_exec:
            async with GhCliGateway(gh_command="gh") as gateway:
                prs = await gateway.list_open_pull_requests("owner/repo", 5)
                files = await gateway.get_changed_files("owner/repo", prs[0])

        assert f"file_{GH_FILES_CAP + 1}.py" in files
        assert len(files) == GH_FILES_CAP + 1
        assert mock_exec.call_count == 2
        assert mock_exec.call_args.args[1] == "api"

    @pytest.mark.asyncio
    async def test_api_failure_is_transport_error(self):
        process = _mock_process(b"", b"HTTP 404: Not Found", returncode=1)
        with patch(EXEC, return_value=process):
            async with GhCliGateway(gh_command="gh") as gateway:
                with pytest.raises(TransportError, match="404"):
                    await gateway.get_changed_files("owner/repo", PRSummary(number=9, branch="b"))
