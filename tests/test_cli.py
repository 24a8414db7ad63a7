"""
Tests for the command line interface.
"""

import json
import sys

from click.testing import CliRunner
from loguru import logger

from review_engine.main import cli


class TestCli:
    """Tests for the review-engine commands."""

    def setup_method(self):
        self.runner = CliRunner()

    def teardown_method(self):
        # setup_logging binds a sink to the runner's stderr
        logger.remove()
        logger.add(sys.stderr)

    def test_gate_json(self):
        result = self.runner.invoke(cli, ['gate', '--method', 'ocr', '--confidence', '0.65', '--json'])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data['requires_review'] is True
        assert data['confidence_percent'] == 65
        assert "65%" in data['justification']

    def test_gate_text_method(self):
        result = self.runner.invoke(cli, ['gate', '-m', 'text', '--confidence', '0.1', '--json'])
        data = json.loads(result.output)
        assert data['requires_review'] is False
        assert data['justification'] is None

    def test_gate_report(self):
        result = self.runner.invoke(cli, ['gate', '--method', 'hybrid', '--confidence', '0.5'])
        assert result.exit_code == 0
        assert "Review Required" in result.output
        assert "Mixed text and OCR extraction" in result.output
        assert "OCR guidance" in result.output

    def test_gate_enhances_prompt(self, tmp_path):
        prompt = tmp_path / 'prompt.txt'
        prompt.write_text("Extract the invoice total.")
        result = self.runner.invoke(
            cli, ['gate', '--method', 'ocr', '--confidence', '0.9', '--prompt', str(prompt)]
        )
        assert result.exit_code == 0
        assert "Accepted" in result.output
        assert "Enhanced prompt" in result.output
        assert "Extract the invoice total." in result.output

    def test_gate_rejects_out_of_range_confidence(self):
        result = self.runner.invoke(cli, ['gate', '--method', 'ocr', '--confidence', '1.5'])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_gate_clamp_policy(self, tmp_path):
        config = tmp_path / 'engine.yaml'
        config.write_text("engine:\n  metadata_policy: clamp\n")
        result = self.runner.invoke(
            cli, ['--config', str(config), 'gate', '--method', 'ocr', '--confidence', '1.5']
        )
        assert result.exit_code == 0
        assert "100%" in result.output

    def test_invalid_config_exits(self, tmp_path):
        config = tmp_path / 'engine.yaml'
        config.write_text("engine:\n  review_threshold: 3\n")
        result = self.runner.invoke(cli, ['--config', str(config), 'shortcuts'])
        assert result.exit_code == 1

    def test_batch_table(self, tmp_path):
        records = tmp_path / 'records.yaml'
        records.write_text(
            "- {id: a, extraction_method: ocr, confidence: 0.65}\n"
            "- {id: b, extraction_method: text, confidence: 0.2}\n"
            "- {id: c, extraction_method: hybrid, confidence: 0.9}\n"
            "- {id: d, extraction_method: ocr, confidence: 5}\n"
        )
        result = self.runner.invoke(cli, ['batch', str(records)])
        assert result.exit_code == 0
        assert "Total: 4 documents" in result.output
        assert "Needs review: 1" in result.output
        assert "Invalid: 1" in result.output

    def test_batch_json(self, tmp_path):
        records = tmp_path / 'records.json'
        records.write_text(json.dumps({'documents': [
            {'id': 'a', 'extractionMethod': 'ocr', 'confidence': 0.4},
            {'id': 'b', 'extraction_method': 'text', 'confidence': 0.4},
        ]}))
        result = self.runner.invoke(cli, ['batch', str(records), '--json'])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [r['id'] for r in data] == ['a', 'b']
        assert [r['requires_review'] for r in data] == [True, False]

    def test_shortcuts_json(self):
        result = self.runner.invoke(cli, ['shortcuts', '--json'])
        assert result.exit_code == 0
        groups = json.loads(result.output)
        assert groups[0]['title'] == 'Document Navigation'
        assert groups[1]['shortcuts'][0] == {'key': 'A', 'description': 'Approve field'}

    def test_shortcuts_table(self):
        result = self.runner.invoke(cli, ['shortcuts'])
        assert result.exit_code == 0
        assert "Approve field" in result.output
        assert "Shift + Tab" in result.output
