"""Unit tests for cli.check_command module."""

from unittest.mock import MagicMock, Mock

from src.cli.check_command import CheckCommand
from src.cli.models import ExitCode, Settings
from src.link_checker.models import ProbeResult
from src.vsdx_package.link_extractor import ExtractionResult
from src.vsdx_package.models import FileResult, Link
from src.vsdx_package.page_graph import PageIndex


def _extraction(links, failed=()):
    result = ExtractionResult(pages=PageIndex(), links=list(links))
    files = sorted({link.file for link in links} | set(failed))
    for file_path in files:
        file_result = FileResult(file=file_path)
        if file_path in failed:
            file_result.mark_failed(Exception("Malformed package"))
        result.file_results.append(file_result)
    return result


def _checker(dead_urls=()):
    """UrlChecker double that marks links broken like the real one."""
    checker = Mock()

    def check(links, on_result=None):
        results = []
        for url in dict.fromkeys(link.url for link in links):
            live = url not in dead_urls
            for link in links:
                if link.url == url:
                    link.broken = not live
            result = ProbeResult(url=url, live=live, status_code=200 if live else 404)
            results.append(result)
            if on_result:
                on_result(result)
        return results

    checker.check.side_effect = check
    return checker


def _command(extraction, url_checker):
    extractor = Mock()
    extractor.extract.return_value = extraction
    output = MagicMock()
    command = CheckCommand(
        settings=Settings(),
        output_handler=output,
        link_extractor=extractor,
        url_checker=url_checker,
    )
    return command, extractor, output


class TestCheckCommand:
    """Test cases for CheckCommand.run()."""

    def test_no_files_is_general_error(self):
        command, extractor, output = _command(_extraction([]), _checker())

        assert command.run([]) == ExitCode.GENERAL_ERROR
        extractor.extract.assert_not_called()
        output.error.assert_called_once()

    def test_all_live_is_success(self):
        links = [Link(file="a.vsdx", page="page1.xml", description="Docs", url="http://ok/")]
        command, extractor, output = _command(_extraction(links), _checker())

        exit_code = command.run(["a.vsdx"])

        assert exit_code == ExitCode.SUCCESS
        extractor.extract.assert_called_once_with(["a.vsdx"])
        assert command.summary.urls_checked == 1
        assert command.summary.broken_links == 0
        output.print_check_summary.assert_called_once_with(command.summary)

    def test_broken_links_reported(self):
        links = [
            Link(file="a.vsdx", page="page1.xml", description="Docs", url="http://dead/"),
            Link(file="a.vsdx", page="page1.xml", description="Docs again", url="http://dead/"),
            Link(file="a.vsdx", page="page1.xml", description="Home", url="http://ok/"),
        ]
        command, _, output = _command(_extraction(links), _checker(dead_urls={"http://dead/"}))

        exit_code = command.run(["a.vsdx"])

        assert exit_code == ExitCode.BROKEN_LINKS
        assert command.summary.broken_links == 2
        assert command.summary.urls_checked == 2
        report = output.print_report.call_args[0][0]
        assert report.lines() == [
            "a.vsdx, page1.xml, Docs, http://dead/",
            "a.vsdx, page1.xml, Docs again, http://dead/",
        ]

    def test_failed_file_is_file_error(self):
        links = [Link(file="a.vsdx", page="page1.xml", description="Docs", url="http://dead/")]
        extraction = _extraction(links, failed=["bad.vsdx"])
        command, _, output = _command(extraction, _checker(dead_urls={"http://dead/"}))

        exit_code = command.run(["a.vsdx", "bad.vsdx"])

        assert exit_code == ExitCode.FILE_ERRORS
        output.warning.assert_called_once()

    def test_progress_advances_per_url(self):
        links = [
            Link(file="a.vsdx", page="page1.xml", description="", url="http://one/"),
            Link(file="a.vsdx", page="page1.xml", description="", url="http://two/"),
        ]
        command, _, output = _command(_extraction(links), _checker())

        command.run(["a.vsdx"])

        progress = output.progress_bar.return_value.__enter__.return_value
        assert progress.update.call_count == 2
        output.progress_bar.assert_called_once_with(2, "Checking URLs")

    def test_unexpected_error_is_general_error(self):
        command, extractor, output = _command(_extraction([]), _checker())
        extractor.extract.side_effect = RuntimeError("disk on fire")

        assert command.run(["a.vsdx"]) == ExitCode.GENERAL_ERROR
        output.error.assert_called_once_with("Unexpected error: disk on fire")

    def test_url_checker_built_from_settings(self):
        command = CheckCommand(
            settings=Settings(max_workers=3, timeout=2.0, follow_redirects=True),
            output_handler=MagicMock(),
        )

        assert command.url_checker.max_workers == 3
        assert command.url_checker.timeout == 2.0
        assert command.url_checker.follow_redirects is True
