"""Tests for the HTTP surface, against a real server on an ephemeral port."""

import threading
import urllib.error
import urllib.request
from collections.abc import Iterator
from contextlib import contextmanager
from urllib.parse import quote

import pytest
from conftest import FixedClassifier

from rdfserving.config import InboundConfig, ModelConfig, ServerConfig, ServingConfig
from rdfserving.example import CategoricalPrediction, CategoryMapping
from rdfserving.generation import Generation, GenerationManager
from rdfserving.serving.server import create_server


def _serving_config(inbound: InboundConfig, context_path: str = "") -> ServingConfig:
    return ServingConfig(
        project="test",
        inbound=inbound,
        model=ModelConfig(path="unused"),
        server=ServerConfig(host="127.0.0.1", port=0, context_path=context_path),
    )


@contextmanager
def _run_server(config: ServingConfig, manager: GenerationManager) -> Iterator[str]:
    server = create_server(config, manager)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    try:
        yield f"http://{host}:{port}{config.server.context_path}"
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def base_url(inbound: InboundConfig, manager: GenerationManager) -> Iterator[str]:
    with _run_server(_serving_config(inbound), manager) as url:
        yield url


def _get(url: str) -> tuple[int, str, str]:
    try:
        with urllib.request.urlopen(url, timeout=5) as response:
            return response.status, response.headers["Content-Type"], response.read().decode()
    except urllib.error.HTTPError as e:
        return e.code, e.headers["Content-Type"], e.read().decode()


def _post(url: str, body: str) -> tuple[int, str]:
    request = urllib.request.Request(url, data=body.encode(), method="POST")
    try:
        with urllib.request.urlopen(request, timeout=5) as response:
            return response.status, response.read().decode()
    except urllib.error.HTTPError as e:
        return e.code, e.read().decode()


class TestClassificationDistributionEndpoint:
    """Tests for /classificationDistribution."""

    def test_get(self, base_url: str) -> None:
        status, content_type, body = _get(f"{base_url}/classificationDistribution/red,3.5,1.2,")
        assert status == 200
        assert content_type.startswith("text/plain")
        assert body == "yes,0.7\nno,0.3\n"

    def test_get_url_encoded(self, base_url: str) -> None:
        line = quote("red,3.5,1.2,", safe="")
        status, _, body = _get(f"{base_url}/classificationDistribution/{line}")
        assert status == 200
        assert body == "yes,0.7\nno,0.3\n"

    def test_post_first_line(self, base_url: str) -> None:
        status, body = _post(
            f"{base_url}/classificationDistribution", "red,3.5,1.2,\nignored,second,line,\n"
        )
        assert status == 200
        assert body == "yes,0.7\nno,0.3\n"

    def test_get_and_post_agree(self, base_url: str) -> None:
        _, _, get_body = _get(f"{base_url}/classificationDistribution/blue,1,2,no")
        _, post_body = _post(f"{base_url}/classificationDistribution", "blue,1,2,no")
        assert get_body == post_body

    def test_missing_path(self, base_url: str) -> None:
        status, _, body = _get(f"{base_url}/classificationDistribution")
        assert status == 400
        assert "No input" in body

    def test_empty_post(self, base_url: str) -> None:
        status, _ = _post(f"{base_url}/classificationDistribution", "")
        assert status == 400

    def test_wrong_column_count(self, base_url: str) -> None:
        status, _, body = _get(f"{base_url}/classificationDistribution/red,3.5")
        assert status == 400
        assert "Wrong column count" in body

    def test_unknown_category(self, base_url: str) -> None:
        status, _, _ = _get(f"{base_url}/classificationDistribution/purple,3.5,1.2,")
        assert status == 400

    def test_bad_numeric(self, base_url: str) -> None:
        status, _, _ = _get(f"{base_url}/classificationDistribution/red,tall,1.2,")
        assert status == 400

    def test_regression_rejected(
        self,
        regression_inbound: InboundConfig,
        manager: GenerationManager,
    ) -> None:
        with _run_server(_serving_config(regression_inbound), manager) as url:
            status, _, body = _get(f"{url}/classificationDistribution/red,3.5,1.2,")
            assert status == 400
            assert "Only supported for classification" in body

    def test_no_model_loaded(self, inbound: InboundConfig) -> None:
        with _run_server(_serving_config(inbound), GenerationManager()) as url:
            status, _, _ = _get(f"{url}/classificationDistribution/red,3.5,1.2,")
            assert status == 503

    def test_internal_inconsistency(
        self,
        inbound: InboundConfig,
        category_mappings: dict[int, CategoryMapping],
    ) -> None:
        """Test that an out-of-sync target mapping is a server fault."""
        generation = Generation(
            classifier=FixedClassifier(CategoricalPrediction([0.2, 0.3, 0.5])),
            category_mappings=category_mappings,
        )
        with _run_server(_serving_config(inbound), GenerationManager(generation)) as url:
            status, _, _ = _get(f"{url}/classificationDistribution/red,3.5,1.2,")
            assert status == 500

    def test_separator_characters_are_record_data(
        self,
        inbound: InboundConfig,
        fixed_classifier: FixedClassifier,
    ) -> None:
        """Test that only CR and LF end a POSTed line."""
        generation = Generation(
            classifier=fixed_classifier,
            category_mappings={
                0: CategoryMapping({"red\x1cdark": 0, "pale blue": 1}),
                3: CategoryMapping({"yes": 0, "no": 1}),
            },
        )
        with _run_server(_serving_config(inbound), GenerationManager(generation)) as url:
            for name in ("red\x1cdark", "pale blue"):
                line = f"{name},1,2,"
                get_status, _, get_body = _get(
                    f"{url}/classificationDistribution/{quote(line, safe='')}"
                )
                post_status, post_body = _post(f"{url}/classificationDistribution", line + "\r\n")
                assert get_status == post_status == 200
                assert get_body == post_body == "yes,0.7\nno,0.3\n"


class TestOtherEndpoints:
    """Tests for /classify, /ready and routing."""

    def test_classify(self, base_url: str) -> None:
        status, _, body = _get(f"{base_url}/classify/red,3.5,1.2,")
        assert status == 200
        assert body == "yes\n"

    def test_classify_post(self, base_url: str) -> None:
        status, body = _post(f"{base_url}/classify", "red,3.5,1.2,\n")
        assert status == 200
        assert body == "yes\n"

    def test_ready(self, base_url: str) -> None:
        status, _, body = _get(f"{base_url}/ready")
        assert status == 200
        assert body == "OK\n"

    def test_not_ready(self, inbound: InboundConfig) -> None:
        with _run_server(_serving_config(inbound), GenerationManager()) as url:
            status, _, _ = _get(f"{url}/ready")
            assert status == 503

    def test_unknown_path(self, base_url: str) -> None:
        status, _, _ = _get(f"{base_url}/recommend/red")
        assert status == 404

    def test_context_path(
        self,
        inbound: InboundConfig,
        manager: GenerationManager,
    ) -> None:
        with _run_server(_serving_config(inbound, context_path="/rdf"), manager) as url:
            status, _, body = _get(f"{url}/classificationDistribution/red,3.5,1.2,")
            assert status == 200
            assert body == "yes,0.7\nno,0.3\n"

            root = url[: -len("/rdf")]
            status, _, _ = _get(f"{root}/classificationDistribution/red,3.5,1.2,")
            assert status == 404
