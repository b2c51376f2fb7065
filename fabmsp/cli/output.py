from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.styles import Style
from prompt_toolkit import print_formatted_text


styles = {
    "main": "#ffffff bold",
    "normal": "#29bf12",
    "error": "#f71735",
    "info": "#d1d8df",
    "warning": "#fcf622 italic",
}

prefixes = {
    "main": "\n",
    "normal": "-> result: ",
    "error": "-> error: ",
    "info": "-> task: ",
    "warning": "warning! ",
}


style_template = Style.from_dict(styles)


def format_text(text, style):

    if style in styles:
        prefix = prefixes.get(style)
        text_template = f"class:{style}"
        text = FormattedText([(text_template, prefix), (text_template, text)])
        return text

    return None


def print_cli(out, err=None, style="info"):

    if out:
        text = format_text(out, style)
    elif err:
        text = format_text(err, "error")
    else:
        text = None

    if text:
        print_formatted_text(text, style=style_template)
