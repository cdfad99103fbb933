WORKBOOK_PATH = "xl/workbook.xml"
SHARED_STRINGS_PATH = "xl/sharedStrings.xml"
STYLES_PATH = "xl/styles.xml"


def sheet_path(ordinal: int) -> str:
    return f"xl/worksheets/sheet{ordinal}.xml"
