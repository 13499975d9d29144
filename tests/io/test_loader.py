import pytest

from layoffs.io import RawRecordLoader
from layoffs.tables import BUSINESS_FIELDS, RawTable

pytestmark = pytest.mark.unit

HEADER = ",".join(BUSINESS_FIELDS)


def _write(path, *rows, header=HEADER, encoding="utf-8"):
    path.write_text("\n".join([header, *rows]) + "\n", encoding=encoding)
    return path


def test_loads_all_cells_as_text(internal_config, temp_dir):
    path = _write(temp_dir / "layoffs.csv",
                  'Acme,SF Bay Area,Retail,100,0.1,3/9/2023,Post-IPO,United States,250')
    raw = RawRecordLoader(internal_config).load(path)

    assert isinstance(raw, RawTable)
    record = raw.frame.iloc[0].to_dict()
    assert record["total_laid_off"] == "100"
    assert record["date"] == "3/9/2023"


def test_null_tokens_loaded_as_absent(internal_config, temp_dir):
    path = _write(temp_dir / "layoffs.csv",
                  'Acme,SF Bay Area,,NULL,0.1,3/9/2023,NULL,United States,')
    record = RawRecordLoader(internal_config).load(path).frame.iloc[0].to_dict()

    assert record["industry"] is None
    assert record["total_laid_off"] is None
    assert record["stage"] is None
    assert record["funds_raised_millions"] is None


def test_quoted_and_padded_values_kept(internal_config, temp_dir):
    path = _write(temp_dir / "layoffs.csv",
                  '" Acme",SF Bay Area,Retail,"1,200",,3/9/2023,Seed,United States.,5')
    record = RawRecordLoader(internal_config).load(path).frame.iloc[0].to_dict()

    assert record["company"] == " Acme"
    assert record["total_laid_off"] == "1,200"
    assert record["country"] == "United States."


def test_configured_delimiter(make_config, temp_dir):
    config = make_config(delimiter=";")
    path = _write(temp_dir / "layoffs.csv",
                  "Acme;SF;Retail;1;0.1;3/9/2023;Seed;Canada;5",
                  header=";".join(BUSINESS_FIELDS))
    assert len(RawRecordLoader(config).load(path)) == 1


def test_missing_column_rejected(internal_config, temp_dir):
    path = _write(temp_dir / "layoffs.csv", "Acme,SF", header="company,location")
    with pytest.raises(ValueError, match="missing business fields"):
        RawRecordLoader(internal_config).load(path)


def test_missing_file_propagates(internal_config, temp_dir):
    with pytest.raises(FileNotFoundError):
        RawRecordLoader(internal_config).load(temp_dir / "nope.csv")


def test_header_only_file_is_empty(internal_config, temp_dir):
    path = _write(temp_dir / "layoffs.csv")
    assert len(RawRecordLoader(internal_config).load(path)) == 0
