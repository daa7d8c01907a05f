from haiku.knowledge.store.models import Document, Heading


def format_descriptions(heading: Heading) -> str:
    """Render a heading's child references as XML for routing."""
    lines = ["<descriptions>"]
    for ref in heading.refs:
        lines.append(f'<description docId="{ref.id}">')
        lines.append(ref.short.strip())
        lines.append("</description>")
    lines.append("</descriptions>")
    return "\n".join(lines)


def format_document(document: Document, **attributes: str) -> str:
    """Render a document as XML, with optional extra attributes on the tag."""
    attrs = "".join(f' {key}="{value}"' for key, value in attributes.items())
    return f'<document id="{document.id}"{attrs}>\n{document.content.strip()}\n</document>'


def quoted_block(title: str, text: str) -> str:
    return f'{title}:\n"""\n{text.strip()}\n"""'
