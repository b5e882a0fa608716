from opendpd.datasets.base import DatasetDescriptor, code, number, text

DATASET = DatasetDescriptor(
    name="arrests",
    resource_id="sdr7-6v3j",
    title="Dallas Police Arrests",
    date_field="ararrestdate",
    filters={
        "zip_code": code("arlzip"),
        "beat": number("arlbeat"),
        "sector": number("arlsector"),
        "district": text("arldistrict"),
    },
    text_fields=(
        "arlzip", "arlcity", "arstate", "arldistrict", "aradow", "arpremises",
        "arweapon", "arcond", "race", "ethnic", "sex",
    ),
    date_fields=(
        "ararrestdate", "arbkdate", "warrantissueddate", "changedate",
        "ofcr_rpt_written_by_date", "ofcr_approved_by_date", "ofcr_received_by_date",
        "apprehended_date", "final_disp_date", "upzdate",
    ),
)
