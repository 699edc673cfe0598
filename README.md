# discountmd

`discountmd` renders Markdown to HTML. Besides classic Markdown inline
syntax it understands a set of extensions, each of which can be switched
on or off with a flag:

- typographic punctuation: curly quotes, `--` and `---` dashes,
  ellipses, `(c)`, `(r)`, `(tm)` and the fractions 1/2, 1/4 and 3/4
- superscripts (`A^B`, `A^(B C)`), strikethrough (`~~gone~~`) and
  LaTeX spans (`$...$`, `$$...$$`, `\(...\)`, `\[...\]`)
- tables with column alignment
- footnotes (`[^note]`) with a configurable id prefix
- pseudo-protocol links: `[text](id:name)`, `[text](class:name)`,
  `[text](lang:fr)`, `[text](abbr:meaning)` and `[text](raw:...)`
- image sizes (`![alt](pic.png =100x50)`) and `{attribute}` lists after
  links
- "safe links" that refuse unknown URL schemes
- automatic links for bare `http:`, `https:`, `ftp:` and `news:` URLs
  and for mail addresses, which are written as character entities
- GitHub-flavoured input, where every line break is a hard break, and a
  document header taken from three leading `%` lines (title, author, date)

## Flags

`discountmd.flags` defines `Flag`, one member per option, and `FlagSet`,
the flags in force for one rendering. A set can be changed flag by flag
(`set`, `clear`, `isset`, or `flag in flags`), loaded from a numeric
bitmap with `set_bitmap`, copied, merged with `update`, tested for
overlap with `any_of`, and described as plain text or as an HTML table
with `describe`. Flag numbers outside the known range are ignored.

## Rendering inline text

`render_line` renders one piece of inline Markdown without wrapping it
in a paragraph:

```python
from discountmd.flags import FlagSet
from discountmd.inline import render_line

print(render_line("*Hello*, `world` -- it's a [link](/home)", FlagSet()))
```

`discountmd.inline.Inline` is the underlying stream: `push` text in,
call `text()` and `emblock()`, and read the HTML from `out`. It can be
given footnotes, `Callbacks` (URL, flag, anchor and code-format hooks)
and a footnote id prefix.

## Documents

`discountmd.tree` holds the document model: `Document`, `Paragraph`
(with a `ParagraphType` and an `Alignment`), `Line`, `Footnote` and
`Callbacks`. `doc_title`, `doc_author` and `doc_date` return the header
fields, and `dump_tree` draws the paragraph tree as text.

`discountmd.reader` builds a `Document` from a string (`gfm_string`),
an open text stream (`gfm_stream`) or any iterable of characters
(`gfm_populate`). It fills in the document's lines and its `%` header.

`discountmd.render` works on a document whose paragraphs are in place:
`document_html` produces its HTML (including the footnote list when
footnotes are on), `css` collects its style blocks, `h1_title` renders
its first level-one header as plain text, and `set_basename` prefixes
every `/`-rooted link with a base URL.

```python
from discountmd.render import document_html
from discountmd.tree import Alignment, Document, Line, Paragraph, ParagraphType

doc = Document(
    code=[
        Paragraph(ParagraphType.HDR, text=[Line("Title")], hnumber=1),
        Paragraph(ParagraphType.MARKUP, text=[Line("Some *text*.")],
                  align=Alignment.PARA),
    ],
    compiled=True,
)
print(document_html(doc))
```

## Option parsing

`discountmd.gethopt` parses argument lists in which both single-letter
options (`-o file`, `-ofile`, `-xyz`) and whole-word options (`-toc`,
`--toc`) begin with a dash. Describe the options with `HOpt`, walk them
with `HOptContext.gethopt` or `HOptContext.options`, and read what is
left from `HOptContext.arguments`. Unknown options and missing arguments
raise `HOptError`. `hoptusage` and `hoptdescribe` return a short or a
detailed usage message.

## Smaller pieces

- `discountmd.emphasis`: `EmphasisBlock` and `emphasize`, which pairs
  `*` and `_` runs into `<em>` and `<strong>`.
- `discountmd.links`: `is_autoprefix`, `safelink`, `pseudo`, `puturl`
  and the link tag descriptions (`LinkyType`).
- `discountmd.textutil`: `strip`, `keyword` and `skip_prefix`.

## What it does not do

- It does not split Markdown text into block-level paragraphs. The
  reader produces a document's lines, but the `Paragraph` tree (headers,
  lists, quotes, code blocks, tables) must be built by the caller before
  `document_html`, `css`, `h1_title` or `dump_tree` can be used, and the
  document marked `compiled`.
- It has no command-line program; it is a library only.