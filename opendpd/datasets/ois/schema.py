from opendpd.datasets.base import DatasetDescriptor, text

DATASET = DatasetDescriptor(
    name="ois",
    resource_id="4gmt-jyx2",
    title="Dallas Police Officer-Involved Shootings",
    date_field="date",
    filters={
        "outcome": text("suspect_deceased_injured_or_shoot_and_miss"),
        "suspect_weapon": text("suspect_weapon"),
        "disposition": text("grand_jury_disposition"),
    },
    text_fields=(
        "suspect_deceased_injured_or_shoot_and_miss", "suspect_weapon", "grand_jury_disposition",
    ),
    date_fields=("date",),
)
