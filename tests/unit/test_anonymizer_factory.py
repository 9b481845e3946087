from unittest.mock import Mock

import pytest

from sandbox_sync.anonymization.anonymizer import Anonymizer
from sandbox_sync.anonymization.exceptions import MissingSaltError
from sandbox_sync.anonymization.factory import AnonymizerFactory
from sandbox_sync.config.settings import Settings


class TestAnonymizerFactory:
    def test_returns_anonymizer_instance(self) -> None:
        settings = Mock(spec=Settings)
        settings.sandbox_salt = "salt"
        anonymizer = AnonymizerFactory.create(settings)
        assert isinstance(anonymizer, Anonymizer)

    def test_uses_configured_salt(self) -> None:
        settings = Mock(spec=Settings)
        settings.sandbox_salt = "salt"
        assert AnonymizerFactory.create(settings).hash_value("x") == Anonymizer("salt").hash_value("x")

    def test_missing_salt_raises(self) -> None:
        settings = Mock(spec=Settings)
        settings.sandbox_salt = ""
        with pytest.raises(MissingSaltError):
            AnonymizerFactory.create(settings)
