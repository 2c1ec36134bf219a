"""Tests for OAuth1 signatures."""

from oauth_client import ParameterList, SignatureMethod, build_base_string, sign

# OAuth Core 1.0, Appendix A.5
PHOTOS_BASE_STRING = (
    "GET&http%3A%2F%2Fphotos.example.net%2Fphotos&file%3Dvacation.jpg"
    "%26oauth_consumer_key%3Ddpf43f3p2l4k3l03%26oauth_nonce%3Dkllo9940pd9333jh"
    "%26oauth_signature_method%3DHMAC-SHA1%26oauth_timestamp%3D1191242096"
    "%26oauth_token%3Dnnch734d00sl2jdk%26oauth_version%3D1.0%26size%3Doriginal"
)
CONSUMER_SECRET = "kd94hf93k423kf44"
TOKEN_SECRET = "pfkkdhi9sl3r4s00"


class TestBaseString:
    """Tests for base string construction."""

    def test_photos_example(self):
        """Test base string matches the published example."""
        params = ParameterList()
        params.add("oauth_consumer_key", "dpf43f3p2l4k3l03")
        params.add("oauth_token", "nnch734d00sl2jdk")
        params.add("oauth_signature_method", "HMAC-SHA1")
        params.add("oauth_timestamp", "1191242096")
        params.add("oauth_nonce", "kllo9940pd9333jh")
        params.add("oauth_version", "1.0")
        params.add("file", "vacation.jpg")
        params.add("size", "original")

        base_string = build_base_string("get", "http://photos.example.net/photos?file=vacation.jpg", params)
        assert base_string == PHOTOS_BASE_STRING

    def test_url_is_normalized(self):
        """Test host-only URL gets scheme-default and trailing slash."""
        base_string = build_base_string("POST", "example.com", ParameterList().add("a", "1"))
        assert base_string == "POST&http%3A%2F%2Fexample.com%2F&a%3D1"

    def test_pathless_url_with_query(self):
        """Test query is removed before the trailing slash is added."""
        base_string = build_base_string("GET", "http://example.com?x=1", ParameterList().add("x", "1"))
        assert base_string == "GET&http%3A%2F%2Fexample.com%2F&x%3D1"


class TestSign:
    """Tests for the signature methods."""

    def test_hmac_sha1_known_answer(self):
        """Test HMAC-SHA1 matches the published example, percent-encoded."""
        signature = sign(PHOTOS_BASE_STRING, CONSUMER_SECRET, TOKEN_SECRET, SignatureMethod.HMAC_SHA1)
        assert signature == "tR3%2BTy81lMeYAr%2FFid0kMTYa%2FWM%3D"

    def test_hmac_sha1_is_deterministic(self):
        """Test same inputs give the same signature."""
        first = sign("POST&x&y", "cs", "ts")
        second = sign("POST&x&y", "cs", "ts")
        assert first == second

    def test_hmac_sha1_depends_on_token_secret(self):
        """Test an empty token secret still keys with the separator."""
        with_secret = sign("POST&x&y", "cs", "ts")
        without_secret = sign("POST&x&y", "cs", None)
        assert with_secret != without_secret
        assert without_secret == sign("POST&x&y", "cs", "")

    def test_plaintext_is_not_encoded(self):
        """Test PLAINTEXT joins the secrets without percent-encoding."""
        assert sign("ignored", "k d&", "t+s", SignatureMethod.PLAINTEXT) == "k d&&t+s"

    def test_plaintext_without_token_secret(self):
        """Test PLAINTEXT keeps the separator when the token secret is absent."""
        assert sign("ignored", CONSUMER_SECRET, None, SignatureMethod.PLAINTEXT) == "kd94hf93k423kf44&"

    def test_rsa_sha1_returns_base_string(self):
        """Test RSA-SHA1 is an unsigned stub."""
        assert sign("POST&x&y", "cs", "ts", SignatureMethod.RSA_SHA1) == "POST&x&y"

    def test_method_names(self):
        """Test oauth_signature_method values."""
        assert SignatureMethod.HMAC_SHA1.value == "HMAC-SHA1"
        assert SignatureMethod.PLAINTEXT.value == "PLAINTEXT"
        assert SignatureMethod.RSA_SHA1.value == "RSA-SHA1"
