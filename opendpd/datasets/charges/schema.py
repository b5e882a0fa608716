from opendpd.datasets.base import DatasetDescriptor, text

# arrestdate is stored as text, so bounds are compared as plain YYYY-MM-DD strings.
DATASET = DatasetDescriptor(
    name="charges",
    resource_id="9u3q-af6p",
    title="Dallas Police Arrest Charges",
    date_field="arrestdate",
    date_with_time=False,
    filters={
        "charge_description": text("chargedesc"),
        "severity": text("severity"),
        "penalty_class": text("pclass"),
        "statute": text("statute"),
        "nibrs_group": text("nibrs_group"),
        "nibrs_code": text("nibrs_code"),
        "nibrs_crime_against": text("nibrs_crimeagainst"),
    },
    text_fields=(
        "chargedesc", "severity", "pclass", "statute",
        "nibrs_group", "nibrs_code", "nibrs_crimeagainst",
    ),
    date_fields=("arrestdate",),
)
