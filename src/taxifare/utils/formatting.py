def format_decimal(value: float, places: int, leading_zero: bool = True) -> str:
    """Rounds to at most ``places`` decimals and drops trailing zeros.

    ``format_decimal(0.456, 2, leading_zero=False)`` gives ``".46"``.
    """
    text = f"{value:.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    if not leading_zero and text != "0":
        if text.startswith("0."):
            text = text[1:]
        elif text.startswith("-0."):
            text = "-" + text[2:]
    return text
