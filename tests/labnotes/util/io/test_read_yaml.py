import pytest
from labnotes.util.io.read_yaml import read_yaml, _normalize_types

class TestNormalizeTypes:
    def test_scientific_notation_strings(self):
        # PyYAML reads "1e-3" style values as strings
        assert _normalize_types("1.0e2") == 100
        assert isinstance(_normalize_types("1.0e2"), int)

        assert _normalize_types("1.5e-1") == 0.15
        assert isinstance(_normalize_types("1.5e-1"), float)

    def test_float_to_int(self):
        assert _normalize_types(10.0) == 10
        assert isinstance(_normalize_types(10.0), int)
        assert _normalize_types(10.5) == 10.5

    def test_recursion(self):
        data = {"a": "1.0e2",
                "b": [10.0, "5.5", "2.0e1"],
                "c": {"d": 5.0}}
        expected = {"a": 100,
                    "b": [10, "5.5", 20],
                    "c": {"d": 5}}
        assert _normalize_types(data) == expected

    def test_other_types_remain(self):
        data = ["string", True, None]
        assert _normalize_types(data) == ["string", True, None]


class TestReadYaml:

    def test_none_gives_empty(self):
        assert read_yaml(None) == {}

    def test_read_dict_returns_as_is(self):
        data = {"a": 10.0}
        assert read_yaml(data) is data

    def test_read_file(self, tmpdir):
        f = tmpdir.join("priors.yaml")
        f.write("r_loc: 1.0e-1\nnested:\n  val: 5.0\n")

        result = read_yaml(str(f))
        assert result["r_loc"] == 0.1
        assert result["nested"]["val"] == 5

    def test_empty_file(self, tmpdir):
        f = tmpdir.join("empty.yaml")
        f.write("")
        assert read_yaml(str(f)) == {}

    def test_file_not_found(self):
        with pytest.raises(ValueError, match="not found"):
            read_yaml("nonexistent_file.yaml")

    def test_invalid_yaml(self, tmpdir):
        f = tmpdir.join("bad.yaml")
        f.write("key: : value")
        with pytest.raises(ValueError, match="Error parsing"):
            read_yaml(str(f))

    def test_not_a_mapping(self, tmpdir):
        f = tmpdir.join("list.yaml")
        f.write("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            read_yaml(str(f))

    def test_override_keys(self):
        config = read_yaml({"a": 1, "b": 2}, override_keys={"b": 3})
        assert config == {"a": 1, "b": 3}

        with pytest.raises(ValueError, match="was not in configuration"):
            read_yaml({"a": 1}, override_keys={"z": 3})

    def test_allowed_keys(self):
        assert read_yaml({"a": 1}, allowed_keys=["a", "b"]) == {"a": 1}
        with pytest.raises(ValueError, match="Unrecognized"):
            read_yaml({"a": 1, "c": 2}, allowed_keys=["a", "b"])
