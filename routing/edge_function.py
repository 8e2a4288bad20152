import json
from string import Template

from routing.rewrite import INDEX_DOCUMENT, RewriteOptions

# cloudfront-js-2.0 viewer request handler, mirrors routing.rewrite.rewrite
_HANDLER = Template("""\
const IS_SPA = $is_spa;
const APEX_REDIRECT = $apex_redirect;
const APEX_DOMAIN = $apex_domain;
const WWW_DOMAIN = $www_domain;
const INDEX_DOCUMENT = $index_document;

async function handler(event) {
    const request = event.request;
    const uri = request.uri;
    const host = request.headers.host ? request.headers.host.value : '';

    if (APEX_REDIRECT && host === APEX_DOMAIN) {
        return {
            statusCode: 301,
            statusDescription: 'Moved Permanently',
            headers: {
                location: { value: 'https://' + WWW_DOMAIN + uri }
            }
        };
    }

    if (uri.charAt(0) !== '/') {
        return request;
    }

    if (uri === '/') {
        request.uri = '/' + INDEX_DOCUMENT;
    } else if (uri.endsWith('/')) {
        request.uri = uri + INDEX_DOCUMENT;
    } else if (!uri.includes('.')) {
        request.uri = IS_SPA ? '/' + INDEX_DOCUMENT : uri + '/' + INDEX_DOCUMENT;
    }

    return request;
}
""")


def render_function_code(options: RewriteOptions) -> str:
    """
    Renders the edge handler source with the rewrite options inlined.
    Values are JSON encoded so domains land as quoted JS string literals.
    """
    return _HANDLER.substitute(
        is_spa=json.dumps(options.is_spa),
        apex_redirect=json.dumps(options.apex_redirect),
        apex_domain=json.dumps(options.apex_domain),
        www_domain=json.dumps(options.www_domain),
        index_document=json.dumps(INDEX_DOCUMENT)
    )
