from __future__ import annotations

from ramlify.generation.profile import GenerationProfile


class TestGenerationProfile:
    def test_defaults(self) -> None:
        profile = GenerationProfile.from_options()
        assert profile == GenerationProfile(package_name="client", prefix_depth=0, formatter_command=("gofmt", "-w"))

    def test_formatter_is_split_like_a_shell(self) -> None:
        profile = GenerationProfile.from_options(formatter="'/opt/go tools/gofmt' -s -w")
        assert profile.formatter_command == ("/opt/go tools/gofmt", "-s", "-w")

    def test_explicit_zero_depth_is_kept(self) -> None:
        assert GenerationProfile.from_options(package_name="api", prefix_depth=0).prefix_depth == 0
        assert GenerationProfile.from_options(prefix_depth=2).prefix_depth == 2
