from opendpd.datasets.base import DatasetDescriptor, code, text

X_COLUMN = "x_coordinate"
# The API spells the northing column without the second "o".
Y_COLUMN = "y_cordinate"

DATASET = DatasetDescriptor(
    name="incidents",
    resource_id="qv6i-rri7",
    title="Dallas Police Incidents",
    date_field="date1",
    filters={
        "nibrs_group": text("nibrs_group"),
        "nibrs_code": text("nibrs_code"),
        "nibrs_crime_against": text("nibrs_crimeagainst"),
        "zip_code": code("zip_code"),
        "beat": code("beat"),
        "division": text("division"),
        "sector": code("sector"),
        "district": text("district"),
    },
    text_fields=(
        "division", "district", "sector", "beat", "premise",
        "offincident", "signal", "ucr_disp", "status", "type",
    ),
    date_fields=(
        "date1", "date2_of_occurrence_2", "reporteddate", "edate", "callorgdate",
        "callreceived", "callcleared", "calldispatched", "upzdate",
    ),
    geo_columns=(X_COLUMN, Y_COLUMN),
    crs="EPSG:2276",
)
