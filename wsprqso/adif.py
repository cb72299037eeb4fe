"""
ADIF (.adi) text rendering.
"""

ADIF_VERSION = "3.1.1"


def adif_field(name, value):
    "ADIF field key-length-value encoding"
    if value is None:
        return ""

    value = str(value)
    return f"<{name}:{len(value)}>{value}"


def adif_header(call, now, program_id, program_version, title="WSPR QSOs"):
    """ Header block: a free text line, then the header fields and <EOH>."""
    return (
        f"{title} for {call}\n"
        + adif_field("ADIF_VER", ADIF_VERSION)
        + adif_field("CREATED_TIMESTAMP", now.strftime("%Y%m%d %H%M%S"))
        + adif_field("PROGRAMID", program_id)
        + adif_field("PROGRAMVERSION", program_version)
        + "<EOH>\n"
    )


def adif_record(record):
    "ADIF record encoding from a dictionary"
    return "".join(adif_field(name, value) for name, value in record.items()) + "<EOR>\n"


def write_adif(out, call, records, now, program_id, program_version, title="WSPR QSOs"):
    """ Write a header and every record to a text stream."""
    out.write(adif_header(call, now, program_id, program_version, title))
    for record in records:
        out.write(adif_record(record))
